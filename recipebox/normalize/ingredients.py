"""Split free-text ingredient lines into quantity, unit and name."""

from __future__ import annotations

import re

from recipebox.models.recipe_schema import Ingredient
from recipebox.normalize.units import VULGAR_FRACTIONS, normalize_unit

_QTY_CHARS = r"\d\s/." + "".join(VULGAR_FRACTIONS)

# QUANTITY <single-word unit> NAME. Multi-word units ("fluid ounces") are not
# recognised here; sources are expected to use the "fl oz" abbreviation.
_STRICT_RE = re.compile(r"^([" + _QTY_CHARS + r"]+?)\s+([a-zA-Z]+)\s+(.+)$")

# OCR text: unit is optional, may be glued to the number ("250g") and may
# carry a trailing period ("Tbs.").
_LENIENT_RE = re.compile(r"^([" + _QTY_CHARS + r"]+)\s*([a-zA-Z]+\.?)?\s+(.+)$")

BULLET_RE = re.compile(r"^[•\-*·◦▪▫+«»]\s*")
# "1." / "2)" / "3:" markers; a digit right after the mark is a decimal, not a marker
NUMBER_MARKER_RE = re.compile(r"^\d+[.):](?!\d)\s*")


def parse_ingredient_text(line: str) -> Ingredient:
    """Parse a line from structured data. Unmatched lines become the name."""
    text = (line or "").strip()
    m = _STRICT_RE.match(text)
    if m:
        return Ingredient(
            quantity=m.group(1).strip(),
            unit=normalize_unit(m.group(2)),
            name=m.group(3).strip(),
        )
    return Ingredient(quantity="", unit="", name=text)


def parse_ingredient_text_lenient(line: str) -> Ingredient:
    text = (line or "").strip()
    m = _LENIENT_RE.match(text)
    if m and m.group(1).strip():
        return Ingredient(
            quantity=m.group(1).strip(),
            unit=normalize_unit(m.group(2)),
            name=m.group(3).strip(),
        )
    return Ingredient(quantity="", unit="", name=text)


def has_list_marker(line: str) -> bool:
    return bool(BULLET_RE.match(line) or NUMBER_MARKER_RE.match(line))


def strip_list_marker(line: str) -> str:
    """Remove one leading bullet and/or step number."""
    cleaned = BULLET_RE.sub("", line, count=1)
    cleaned = NUMBER_MARKER_RE.sub("", cleaned, count=1)
    return cleaned.strip()
