"""Map external recipe categories onto the app's category vocabulary."""

from __future__ import annotations

from typing import Dict

DEFAULT_CATEGORY = "Other"

CATEGORY_MAP: Dict[str, str] = {
    # Breakfast
    "breakfast": "Breakfast",
    "brunch": "Breakfast",
    # Lunch
    "lunch": "Lunch",
    "luncheon": "Lunch",
    # Dinner
    "dinner": "Dinner",
    "supper": "Dinner",
    "mains": "Main Course",
    "main": "Main Course",
    "main course": "Main Course",
    "main dish": "Main Course",
    "entree": "Main Course",
    "entrée": "Main Course",
    # Dessert
    "dessert": "Dessert",
    "desserts": "Dessert",
    "sweet": "Dessert",
    "sweets": "Dessert",
    "baking": "Dessert",
    # Snack
    "snack": "Snack",
    "snacks": "Snack",
    # Appetizer
    "appetizer": "Appetizer",
    "appetizers": "Appetizer",
    "starter": "Appetizer",
    "starters": "Appetizer",
    "hors d'oeuvre": "Appetizer",
    "finger food": "Appetizer",
    # Beverage
    "beverage": "Beverage",
    "beverages": "Beverage",
    "drink": "Beverage",
    "drinks": "Beverage",
    "cocktail": "Beverage",
    "cocktails": "Beverage",
    # Common site sections kept as their own categories
    "soup": "Soups",
    "soups": "Soups",
    "salad": "Salads",
    "salads": "Salads",
    "side": "Sides",
    "sides": "Sides",
    "side dish": "Sides",
    "bread": "Breads",
    "breads": "Breads",
    "pasta": "Pasta",
    "seafood": "Seafood",
    "vegetarian": "Vegetarian",
    "vegan": "Vegan",
}


def map_category(raw) -> str:
    """Return the mapped category, or the input with its first letter capitalized.

    Lists use their first element. Empty input gives "Other".
    """
    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    if raw is None:
        return DEFAULT_CATEGORY
    s = str(raw).strip()
    if not s:
        return DEFAULT_CATEGORY
    mapped = CATEGORY_MAP.get(s.lower())
    if mapped:
        return mapped
    return s[0].upper() + s[1:]
