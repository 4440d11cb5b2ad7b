"""
StockMeta - Output Sanitizer
Deterministic clean-up of free-form model text into valid metadata fields.

Every function here always returns a usable value: malformed model output is
replaced by the documented default instead of failing the item.

Keyword policies:
  Adobe Stock (strict):       lowercase, digits removed, only letters/commas/whitespace kept,
                              split on commas or newlines
  Shutterstock (permissive):  case and digits kept, split on commas or newlines
"""

import re

from stockmeta.errors import MalformedOutputError


# ─── Platform Limits ──────────────────────────────────────────────────────────
TITLE_MAX_LENGTH = 200
KEYWORD_MAX_LENGTH = 30
ADOBE_MAX_KEYWORDS = 49
SHUTTERSTOCK_MAX_KEYWORDS = 50

ADOBE_CATEGORY_MIN = 1
ADOBE_CATEGORY_MAX = 21
DEFAULT_ADOBE_CATEGORY = 8                    # Graphic Resources
DEFAULT_SHUTTERSTOCK_CATEGORY = "Miscellaneous"

_QUOTE_CHARS = "\"'“”‘’"
_QUOTE_TABLE = str.maketrans("", "", _QUOTE_CHARS)

_DIGITS_RE = re.compile(r"\d+")
_STRICT_DISALLOWED_RE = re.compile(r"[^a-z,\s]")
_KEYWORD_SPLIT_RE = re.compile(r"[,\r\n]")
_CATEGORY_RE = re.compile(r"\b([1-9]|1[0-9]|2[01])\b")


def sanitize_title(raw):
    """Clean a title (or Shutterstock description).

    Strips quote characters and surrounding whitespace, then cuts to
    200 characters. The cut is a hard character limit and may split a word.
    """
    if not raw:
        return ""
    text = str(raw).replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
    text = text.translate(_QUOTE_TABLE).strip()
    return text[:TITLE_MAX_LENGTH]


def split_keywords(text):
    """Split a comma-separated keyword string, trimming tokens and dropping empty ones."""
    if not text:
        return []
    return [kw.strip() for kw in str(text).split(",") if kw.strip()]


def normalize_keyword_tokens(tokens, max_count):
    """Trim tokens, drop empty and over-long ones, dedupe keeping the first, then cap."""
    seen = set()
    kw_list = []
    for token in tokens:
        kw = token.strip()
        if not kw or len(kw) >= KEYWORD_MAX_LENGTH:
            continue
        if kw in seen:
            continue
        seen.add(kw)
        kw_list.append(kw)
    return kw_list[:max_count]


def sanitize_keywords(raw, max_count, strict=True):
    """
    Normalize a raw keyword answer into a comma-separated keyword string.

    Args:
        raw: Model output text
        max_count: Keyword cap (49 for Adobe Stock, 50 for Shutterstock)
        strict: Adobe policy when True, Shutterstock policy when False

    Returns:
        Keywords joined with ", " (empty string when nothing survives)
    """
    if not raw:
        return ""
    text = str(raw)

    if strict:
        text = text.lower()
        text = _DIGITS_RE.sub("", text)
        text = _STRICT_DISALLOWED_RE.sub("", text)

    # comma- or newline-separated answers
    tokens = _KEYWORD_SPLIT_RE.split(text)
    return ", ".join(normalize_keyword_tokens(tokens, max_count))


def _extract_category(raw):
    match = _CATEGORY_RE.search(str(raw or ""))
    if not match:
        raise MalformedOutputError(f"No category number in model output: {str(raw)[:80]!r}")
    try:
        return int(match.group(1))
    except ValueError:
        raise MalformedOutputError(f"Unparseable category: {match.group(1)!r}")


def clamp_category(value, minimum=ADOBE_CATEGORY_MIN, maximum=ADOBE_CATEGORY_MAX):
    return max(minimum, min(maximum, value))


def sanitize_category(raw, minimum=ADOBE_CATEGORY_MIN, maximum=ADOBE_CATEGORY_MAX,
                      default=DEFAULT_ADOBE_CATEGORY):
    """Extract the Adobe Stock category number (1-21) from model text.

    Falls back to ``default`` when the text holds no number in range.
    """
    try:
        value = _extract_category(raw)
    except MalformedOutputError:
        return default
    return clamp_category(value, minimum, maximum)


def sanitize_shutterstock_category(raw, default=DEFAULT_SHUTTERSTOCK_CATEGORY):
    """Trim the category answer; names are passed through without validation."""
    text = str(raw or "").strip()
    return text or default
