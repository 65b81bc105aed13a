"""Duration and yield parsing: ISO-8601 durations, labelled free text, servings."""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_HOURS_RE = re.compile(r"(\d+)H")
_MINUTES_RE = re.compile(r"(\d+)M")

_LABELLED_TIME_RE = {
    "prep": re.compile(r"prep(?:\s+time)?:?\s*(\d+)\s*(min|minute|minutes|hr|hour|hours)", re.I),
    "cook": re.compile(r"cook(?:\s+time)?:?\s*(\d+)\s*(min|minute|minutes|hr|hour|hours)", re.I),
    "total": re.compile(r"total(?:\s+time)?:?\s*(\d+)\s*(min|minute|minutes|hr|hour|hours)", re.I),
}

_SERVINGS_TEXT_RE = (
    re.compile(r"serves?:?\s*(\d+)", re.I),
    re.compile(r"yield:?\s*(\d+)", re.I),
    re.compile(r"makes?:?\s*(\d+)", re.I),
)


def parse_time(duration) -> int:
    """ISO-8601 style duration ("PT1H30M") to whole minutes; 0 when absent."""
    if not duration or not isinstance(duration, str):
        return 0
    hours = _HOURS_RE.search(duration)
    minutes = _MINUTES_RE.search(duration)
    return (int(hours.group(1)) if hours else 0) * 60 + (int(minutes.group(1)) if minutes else 0)


def extract_labeled_time(text: str, label: str) -> int:
    """Minutes for a "<label> time: N min|hr" phrase anywhere in text."""
    pattern = _LABELLED_TIME_RE.get(label)
    if pattern is None or not text:
        return 0
    m = pattern.search(text)
    if not m:
        return 0
    value = int(m.group(1))
    if m.group(2).lower().startswith(("hr", "hour")):
        return value * 60
    return value


def derive_additional_time(total: int, prep: int, cook: int) -> int:
    """Time not covered by prep and cook; clamped at 0 for inconsistent sources."""
    if not total:
        return 0
    remainder = total - prep - cook
    if remainder < 0:
        logger.warning(
            "Total time %d is shorter than prep %d + cook %d; using 0 additional minutes",
            total, prep, cook,
        )
        return 0
    return remainder


def parse_servings(recipe_yield) -> int:
    """First integer in a recipeYield value ("4 servings", 6, ["8", "8 slices"])."""
    if isinstance(recipe_yield, (list, tuple)):
        recipe_yield = recipe_yield[0] if recipe_yield else None
    if not recipe_yield or isinstance(recipe_yield, bool):
        return 0
    if isinstance(recipe_yield, (int, float)):
        return max(int(recipe_yield), 0)
    m = re.search(r"\d+", str(recipe_yield))
    return int(m.group(0)) if m else 0


def extract_servings(text: str) -> int:
    """Servings from "Serves 4", "Yield: 6 servings" or "Makes 8" in free text."""
    if not text:
        return 0
    for pattern in _SERVINGS_TEXT_RE:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return 0


def format_minutes(minutes: Optional[int]) -> str:
    """Human-readable duration for display ("1 hr 30 min"); "-" for none."""
    if not minutes:
        return "-"
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"
