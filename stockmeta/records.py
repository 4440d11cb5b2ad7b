"""
StockMeta - Metadata Records
Immutable value objects produced by the pipeline, one per filename.
"""

from dataclasses import asdict, dataclass, field
from typing import List, Union

from stockmeta.prompt_builder import PLATFORM_ADOBE, PLATFORM_SHUTTERSTOCK
from stockmeta.sanitizer import DEFAULT_ADOBE_CATEGORY, DEFAULT_SHUTTERSTOCK_CATEGORY


@dataclass(frozen=True)
class AdobeRecord:
    filename: str
    title: str
    keywords: str
    category: int
    releases: str = ""

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ShutterstockRecord:
    filename: str
    description: str
    keywords: str
    categories: str = DEFAULT_SHUTTERSTOCK_CATEGORY
    editorial: str = "No"
    mature_content: str = "No"
    illustration: str = "Yes"

    def to_dict(self):
        return {
            "filename": self.filename,
            "description": self.description,
            "keywords": self.keywords,
            "categories": self.categories,
            "editorial": self.editorial,
            "matureContent": self.mature_content,
            "illustration": self.illustration,
        }


@dataclass(frozen=True)
class ItemError:
    filename: str
    reason: str

    def to_dict(self):
        return asdict(self)


Record = Union[AdobeRecord, ShutterstockRecord]


@dataclass
class BatchResult:
    """Outcome of one batch: records and errors, both in input order."""

    records: List[Record] = field(default_factory=list)
    errors: List[ItemError] = field(default_factory=list)
    usage: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "data": [r.to_dict() for r in self.records],
            "errors": [e.to_dict() for e in self.errors],
            "usage": dict(self.usage),
        }


def record_from_dict(row, platform):
    """Build a record from a transport mapping (possibly edited by hand).

    Values are taken as given; bounds are enforced again by the CSV encoder.
    """
    if platform == PLATFORM_ADOBE:
        return AdobeRecord(
            filename=str(row.get("filename") or ""),
            title=str(row.get("title") or ""),
            keywords=str(row.get("keywords") or ""),
            category=row.get("category", DEFAULT_ADOBE_CATEGORY),
            releases=str(row.get("releases") or ""),
        )
    if platform == PLATFORM_SHUTTERSTOCK:
        return ShutterstockRecord(
            filename=str(row.get("filename") or ""),
            description=str(row.get("description") or ""),
            keywords=str(row.get("keywords") or ""),
            categories=str(row.get("categories") or ""),
            editorial=str(row.get("editorial") or ""),
            mature_content=str(row.get("matureContent") or row.get("mature_content") or ""),
            illustration=str(row.get("illustration") or ""),
        )
    raise ValueError(f"Unknown platform: {platform}")
