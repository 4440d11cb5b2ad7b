import pytest

from stockmeta.sanitizer import (
    ADOBE_MAX_KEYWORDS,
    SHUTTERSTOCK_MAX_KEYWORDS,
    clamp_category,
    sanitize_category,
    sanitize_keywords,
    sanitize_shutterstock_category,
    sanitize_title,
    split_keywords,
)


# ─── Titles ───────────────────────────────────────────────────────────────────

def test_title_strips_quotes_and_whitespace():
    assert sanitize_title('  "Expand arrows" it\'s  ') == "Expand arrows its"


def test_title_strips_typographic_quotes():
    assert sanitize_title("“Home” sweet ‘home’") == "Home sweet home"


def test_title_truncates_to_exactly_200_characters():
    raw = "a" * 120 + " " + "b" * 129
    assert len(raw) == 250
    out = sanitize_title(raw)
    assert len(out) == 200
    assert out == raw[:200]


def test_title_truncation_can_cut_mid_word():
    raw = "x" * 199 + "yz"
    assert sanitize_title(raw) == "x" * 199 + "y"


def test_title_at_limit_is_untouched():
    raw = "c" * 200
    assert sanitize_title(raw) == raw


def test_title_is_idempotent_on_clean_input():
    clean = "Minimal expand arrows for modern user interfaces"
    assert sanitize_title(clean) == clean
    assert sanitize_title(sanitize_title(clean)) == clean


def test_title_joins_lines():
    assert sanitize_title("Expand\narrows\r\nicon") == "Expand arrows icon"


@pytest.mark.parametrize("raw", ["", None, "   ", "\"'\""])
def test_title_empty_inputs(raw):
    assert sanitize_title(raw) == ""


# ─── Keywords (Adobe, strict) ─────────────────────────────────────────────────

def test_strict_keywords_drop_digit_tokens():
    assert sanitize_keywords("expand, arrow, 2, resize", ADOBE_MAX_KEYWORDS) == "expand, arrow, resize"


def test_strict_keywords_lowercase_and_filter_characters():
    out = sanitize_keywords("Expand!, UI/UX, Zoom-In, 3D model", ADOBE_MAX_KEYWORDS)
    assert out == "expand, uiux, zoomin, d model"


def test_strict_keywords_split_on_newlines():
    assert sanitize_keywords("expand\narrow\nresize", ADOBE_MAX_KEYWORDS) == "expand, arrow, resize"


def test_strict_keywords_mixed_commas_and_newlines():
    raw = "Expand, Arrow\r\nZoom\nresize, 4K\nfullscreen,\nmaximize"
    assert sanitize_keywords(raw, ADOBE_MAX_KEYWORDS) == "expand, arrow, zoom, resize, k, fullscreen, maximize"


def test_strict_keywords_dedupe_keeps_first_occurrence():
    out = sanitize_keywords("arrow, Expand, arrow, ARROW, resize, expand", ADOBE_MAX_KEYWORDS)
    assert out == "arrow, expand, resize"


def test_strict_keywords_drop_long_tokens():
    long_token = "a" * 30
    just_short = "b" * 29
    out = sanitize_keywords(f"{long_token}, {just_short}, ok", ADOBE_MAX_KEYWORDS)
    assert out == f"{just_short}, ok"


def test_strict_keywords_cap_at_49():
    raw = ", ".join(f"kw{chr(97 + i // 26)}{chr(97 + i % 26)}" for i in range(60))
    out = sanitize_keywords(raw, ADOBE_MAX_KEYWORDS)
    tokens = out.split(", ")
    assert len(tokens) == 49
    assert tokens[0] == "kwaa"


def test_exactly_49_keywords_survive_untouched():
    words = [f"word{chr(97 + i // 26)}{chr(97 + i % 26)}" for i in range(49)]
    raw = ", ".join(words)
    assert sanitize_keywords(raw, ADOBE_MAX_KEYWORDS) == raw


@pytest.mark.parametrize("raw", ["", None, "1, 2, 3", " , ,, "])
def test_strict_keywords_can_be_empty(raw):
    assert sanitize_keywords(raw, ADOBE_MAX_KEYWORDS) == ""


def test_strict_keyword_properties_hold_for_noisy_input():
    raw = "Arrow, arrow 2, 42, ZOOM , , zoom, " + "x" * 40 + ", Résumé, a,b,c," * 20
    out = sanitize_keywords(raw, ADOBE_MAX_KEYWORDS)
    tokens = out.split(", ")
    assert len(tokens) <= ADOBE_MAX_KEYWORDS
    assert len(tokens) == len(set(tokens))
    for token in tokens:
        assert token
        assert token == token.lower()
        assert len(token) < 30
        assert not any(ch.isdigit() for ch in token)


# ─── Keywords (Shutterstock, permissive) ──────────────────────────────────────

def test_permissive_keywords_keep_case_and_digits():
    out = sanitize_keywords("Home, 3D house, Real Estate", SHUTTERSTOCK_MAX_KEYWORDS, strict=False)
    assert out == "Home, 3D house, Real Estate"


def test_permissive_keywords_split_on_newlines():
    out = sanitize_keywords("home\nhouse\r\nroof, roof", SHUTTERSTOCK_MAX_KEYWORDS, strict=False)
    assert out == "home, house, roof"


def test_permissive_keywords_cap_at_50():
    raw = ",".join(f"keyword {i}" for i in range(80))
    tokens = sanitize_keywords(raw, SHUTTERSTOCK_MAX_KEYWORDS, strict=False).split(", ")
    assert len(tokens) == 50
    assert tokens[-1] == "keyword 49"


def test_permissive_keywords_drop_long_tokens():
    out = sanitize_keywords("a very long descriptive keyword phrase, roof", 50, strict=False)
    assert out == "roof"


# ─── Categories ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    ("7", 7),
    ("1", 1),
    ("21", 21),
    ("Category: 19", 19),
    ("3. Business", 3),
    ("0", 8),
    ("22", 8),
    ("category: 25", 8),
    ("banana", 8),
    ("", 8),
    (None, 8),
    ("-5", 5),
])
def test_sanitize_category(raw, expected):
    assert sanitize_category(raw) == expected


def test_sanitize_category_custom_default():
    assert sanitize_category("none", default=1) == 1


def test_sanitize_category_result_always_in_range():
    for raw in ["100", "12 or 30", "x9y", "9", "20 21 22", "0.5"]:
        assert 1 <= sanitize_category(raw) <= 21


def test_clamp_category_bounds():
    assert clamp_category(0) == 1
    assert clamp_category(99) == 21
    assert clamp_category(5) == 5


def test_shutterstock_category_passthrough_and_default():
    assert sanitize_shutterstock_category("  Technology, Objects \n") == "Technology, Objects"
    assert sanitize_shutterstock_category("Spaceships") == "Spaceships"
    assert sanitize_shutterstock_category("   ") == "Miscellaneous"
    assert sanitize_shutterstock_category(None) == "Miscellaneous"


def test_split_keywords():
    assert split_keywords(" a, ,b ,c,, ") == ["a", "b", "c"]
    assert split_keywords("") == []
