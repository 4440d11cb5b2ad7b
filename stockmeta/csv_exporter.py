"""
StockMeta - CSV Exporter
Export metadata records to Adobe Stock or Shutterstock CSV format.

Every cell is re-derived from the record at export time, so rows edited by
hand after generation are brought back within platform limits:
  Adobe Stock:  title unquoted and cut to 200 chars, max 49 unique lowercase keywords,
                category clamped to 1-21
  Shutterstock: description cut to 200 chars, max 50 unique keywords, flag defaults filled in
"""

import csv
import io
import logging

from stockmeta.prompt_builder import PLATFORM_ADOBE, PLATFORM_SHUTTERSTOCK
from stockmeta.records import record_from_dict
from stockmeta.sanitizer import (
    ADOBE_CATEGORY_MAX, ADOBE_CATEGORY_MIN, ADOBE_MAX_KEYWORDS, DEFAULT_ADOBE_CATEGORY,
    DEFAULT_SHUTTERSTOCK_CATEGORY, SHUTTERSTOCK_MAX_KEYWORDS, TITLE_MAX_LENGTH,
    clamp_category, normalize_keyword_tokens, sanitize_title, split_keywords,
)

logger = logging.getLogger(__name__)

ADOBE_HEADERS = ["Filename", "Title", "Keywords", "Category", "Releases"]
SHUTTERSTOCK_HEADERS = [
    "Filename", "Description", "Keywords", "Categories",
    "Editorial", "Mature Content", "Illustration"
]

EXPORT_FILENAMES = {
    PLATFORM_ADOBE: "adobe_stock_metadata.csv",
    PLATFORM_SHUTTERSTOCK: "shutterstock_metadata.csv",
}


def default_export_filename(platform):
    """Return the download filename for a platform export."""
    return EXPORT_FILENAMES.get(platform, EXPORT_FILENAMES[PLATFORM_ADOBE])


def _cap_keywords(keywords, max_count, lowercase=False):
    tokens = split_keywords(keywords)
    if lowercase:
        tokens = [kw.lower() for kw in tokens]
    return ", ".join(normalize_keyword_tokens(tokens, max_count))


def _export_category(value):
    """Clamp an Adobe category; zero, blank or non-numeric values fall back to 8."""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_ADOBE_CATEGORY
    if not number:
        return DEFAULT_ADOBE_CATEGORY
    return clamp_category(number, ADOBE_CATEGORY_MIN, ADOBE_CATEGORY_MAX)


def _adobe_row(record):
    return [
        record.filename,
        sanitize_title(record.title),
        _cap_keywords(record.keywords, ADOBE_MAX_KEYWORDS, lowercase=True),
        _export_category(record.category),
        record.releases or "",
    ]


def _shutterstock_row(record):
    return [
        record.filename,
        (record.description or "")[:TITLE_MAX_LENGTH],
        _cap_keywords(record.keywords, SHUTTERSTOCK_MAX_KEYWORDS),
        record.categories or DEFAULT_SHUTTERSTOCK_CATEGORY,
        record.editorial or "No",
        record.mature_content or "No",
        record.illustration or "Yes",
    ]


def encode(records, platform):
    """
    Encode records as CSV text for the selected platform.

    Args:
        records: Iterable of AdobeRecord/ShutterstockRecord objects or plain dicts
        platform: "adobe" or "shutterstock"

    Returns:
        CSV text with a header row, comma-delimited, standard quoting
    """
    if platform == PLATFORM_ADOBE:
        headers, make_row = ADOBE_HEADERS, _adobe_row
    elif platform == PLATFORM_SHUTTERSTOCK:
        headers, make_row = SHUTTERSTOCK_HEADERS, _shutterstock_row
    else:
        raise ValueError(f"Unknown platform: {platform}")

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)

    count = 0
    for record in records:
        if isinstance(record, dict):
            record = record_from_dict(record, platform)
        writer.writerow(make_row(record))
        count += 1

    logger.debug("Encoded %d %s row(s)", count, platform)
    return buffer.getvalue()


def export_csv(records, output_path, platform=PLATFORM_ADOBE):
    """
    Write records to a UTF-8 CSV file.

    Returns:
        Path to the saved CSV file
    """
    text = encode(records, platform)
    with open(output_path, 'w', newline='', encoding='utf-8') as csvfile:
        csvfile.write(text)
    logger.info("Exported %s CSV to %s", platform, output_path)
    return output_path
