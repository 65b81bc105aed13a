"""Quantity parsing, unit normalization and metric/imperial display conversion.

Every unit that leaves `normalize_unit` is either one of the canonical tokens
below or the caller's own token, lower-cased. Conversion only ever happens
between the metric and imperial systems; `unit` and anything unknown is
neutral and left alone.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Mapping, NamedTuple, Optional, Union

from recipebox.models.recipe_schema import Ingredient

CANONICAL_UNITS = (
    "cups", "tbsp", "tsp", "fl oz", "ml", "l",
    "g", "kg", "oz", "lbs",
    "unit",
)

METRIC_UNITS = frozenset({"ml", "l", "g", "kg"})
IMPERIAL_UNITS = frozenset({"cups", "tbsp", "tsp", "fl oz", "oz", "lbs"})

UNIT_ALIASES: Dict[str, str] = {
    # Volume
    "cup": "cups",
    "cups": "cups",
    "c": "cups",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "tbl": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp": "tsp",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fl oz": "fl oz",
    "fl. oz": "fl oz",
    "floz": "fl oz",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "ml": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "l": "l",
    # Weight
    "gram": "g",
    "grams": "g",
    "g": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kg": "kg",
    "ounce": "oz",
    "ounces": "oz",
    "oz": "oz",
    "pound": "lbs",
    "pounds": "lbs",
    "lb": "lbs",
    "lbs": "lbs",
    # Countable
    "unit": "unit",
    "units": "unit",
    "piece": "unit",
    "pieces": "unit",
    "each": "unit",
}

# canonical unit -> (kind, factor to base); base is ml for volume, g for weight
CONVERSION_FACTORS: Dict[str, tuple[str, float]] = {
    "ml": ("volume", 1.0),
    "l": ("volume", 1000.0),
    "tsp": ("volume", 5.0),
    "tbsp": ("volume", 15.0),
    "cups": ("volume", 250.0),
    "fl oz": ("volume", 29.5735),
    "g": ("weight", 1.0),
    "kg": ("weight", 1000.0),
    "oz": ("weight", 28.3495),
    "lbs": ("weight", 453.592),
}

BASE_UNITS = {"volume": "ml", "weight": "g"}

PLACEHOLDER_QUANTITIES = frozenset(
    {"to taste", "a pinch", "pinch", "as needed", "a dash", "dash"}
)

VULGAR_FRACTIONS: Dict[str, float] = {
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
    "⅕": 0.2,
    "⅖": 0.4,
    "⅗": 0.6,
    "⅘": 0.8,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

_DECIMAL_RE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_VULGAR_RE = re.compile(r"^(\d*)\s*([" + "".join(VULGAR_FRACTIONS) + r"])$")


class MetricAmount(NamedTuple):
    value: float
    base_unit: str


def parse_quantity(raw) -> Optional[float]:
    """Return the numeric value of a quantity string, or None.

    Accepts integers, decimals, simple fractions ("1/2"), mixed numbers
    ("1 1/2") and vulgar fractions ("1½"). None means "do not convert".
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    s = str(raw).strip()
    if not s or s.lower() in PLACEHOLDER_QUANTITIES:
        return None

    m = _DECIMAL_RE.match(s)
    if m:
        return float(m.group(1))

    m = _MIXED_RE.match(s)
    if m:
        whole, num, den = (int(g) for g in m.groups())
        if den == 0:
            return None
        return whole + num / den

    m = _FRACTION_RE.match(s)
    if m:
        num, den = int(m.group(1)), int(m.group(2))
        if den == 0:
            return None
        return num / den

    m = _VULGAR_RE.match(s)
    if m:
        whole = int(m.group(1)) if m.group(1) else 0
        return whole + VULGAR_FRACTIONS[m.group(2)]

    return None


def normalize_unit(raw) -> str:
    """Map a unit spelling onto the canonical vocabulary.

    Unknown units are returned lower-cased and trimmed; nothing raises.
    """
    if not raw:
        return ""
    u = str(raw).strip().lower()
    if u.endswith("."):
        u = u[:-1]
    u = re.sub(r"\s+", " ", u)
    return UNIT_ALIASES.get(u, u)


def unit_system(unit) -> str:
    """Return "metric", "imperial" or "neutral" for a unit spelling."""
    u = normalize_unit(unit)
    if u in METRIC_UNITS:
        return "metric"
    if u in IMPERIAL_UNITS:
        return "imperial"
    return "neutral"


def convert_to_metric_base(quantity, unit) -> Optional[MetricAmount]:
    """Express a quantity in ml (volume) or g (weight)."""
    value = parse_quantity(quantity)
    if value is None:
        return None
    info = CONVERSION_FACTORS.get(normalize_unit(unit))
    if info is None:
        return None
    kind, factor = info
    return MetricAmount(value * factor, BASE_UNITS[kind])


def format_quantity(value: float) -> str:
    """Two decimals at most, no trailing zeros, snapped to whole numbers.

    Amounts below 0.01 keep two significant digits instead of showing as 0.
    """
    nearest = round(value)
    if nearest and abs(value - nearest) < 0.01:
        return str(int(nearest))
    places = 2
    if 0 < abs(value) < 0.01:
        places = 1 - math.floor(math.log10(abs(value)))
    return f"{value:.{places}f}".rstrip("0").rstrip(".")


def _best_metric(amount: MetricAmount) -> tuple[float, str]:
    if amount.base_unit == "ml":
        return (amount.value / 1000, "l") if amount.value >= 1000 else (amount.value, "ml")
    return (amount.value / 1000, "kg") if amount.value >= 1000 else (amount.value, "g")


def _best_imperial(amount: MetricAmount) -> tuple[float, str]:
    if amount.base_unit == "ml":
        for unit in ("cups", "tbsp", "tsp"):
            qty = amount.value / CONVERSION_FACTORS[unit][1]
            if qty >= 1:
                return qty, unit
        return amount.value / CONVERSION_FACTORS["fl oz"][1], "fl oz"
    lbs = amount.value / CONVERSION_FACTORS["lbs"][1]
    if lbs >= 1:
        return lbs, "lbs"
    return amount.value / CONVERSION_FACTORS["oz"][1], "oz"


def convert_ingredient(
    ingredient: Union[Ingredient, Mapping], target_system: str
) -> Optional[dict]:
    """Re-express an ingredient in the target unit system for display.

    Returns {"quantity", "unit"} or None when nothing should change: the
    ingredient is already in the target system, its unit is neutral, or its
    quantity is not numeric.
    """
    if not isinstance(ingredient, Ingredient):
        ingredient = Ingredient.model_validate(ingredient)
    if target_system not in ("metric", "imperial"):
        raise ValueError(f"Unknown unit system: {target_system!r}")

    current = unit_system(ingredient.unit)
    if current == "neutral" or current == target_system:
        return None

    amount = convert_to_metric_base(ingredient.quantity, ingredient.unit)
    if amount is None:
        return None

    if target_system == "metric":
        qty, unit = _best_metric(amount)
    else:
        qty, unit = _best_imperial(amount)
    return {"quantity": format_quantity(qty), "unit": unit}
