"""Recipe extraction from conventional page markup when a page has no JSON-LD.

Each field has an ordered list of strategies. A strategy takes the parsed
page and returns a value or None; the first non-empty value wins. Site
specific strategies can be added with `register_strategy` or passed per call.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from recipebox.ingest.fetch import absolute_url
from recipebox.models.recipe_schema import Recipe
from recipebox.normalize.category import DEFAULT_CATEGORY
from recipebox.normalize.ingredients import parse_ingredient_text

logger = logging.getLogger(__name__)

TextStrategy = Callable[[BeautifulSoup], Optional[str]]
ListStrategy = Callable[[BeautifulSoup], Optional[List[str]]]


def _clean(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def first_text(selector: str) -> TextStrategy:
    """Text of the first element matching selector."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        el = soup.select_one(selector)
        return _clean(el.get_text(" ")) if el is not None else None

    strategy.__name__ = f"first_text({selector})"
    return strategy


def first_attr(selector: str, attr: str) -> TextStrategy:
    """Attribute value of the first element matching selector."""

    def strategy(soup: BeautifulSoup) -> Optional[str]:
        el = soup.select_one(selector)
        if el is None:
            return None
        value = el.get(attr)
        return value.strip() if isinstance(value, str) else None

    strategy.__name__ = f"first_attr({selector}, {attr})"
    return strategy


def all_texts(selector: str) -> ListStrategy:
    """Non-empty texts of every element matching selector, in document order."""

    def strategy(soup: BeautifulSoup) -> Optional[List[str]]:
        texts = [_clean(el.get_text(" ")) for el in soup.select(selector) if isinstance(el, Tag)]
        return [t for t in texts if t]

    strategy.__name__ = f"all_texts({selector})"
    return strategy


STRATEGIES: Dict[str, list] = {
    "title": [
        first_text('h1[itemprop="name"]'),
        first_text(".recipe-title"),
        first_text("h1.recipe__title"),
        first_text("h1"),
    ],
    "description": [
        first_text('[itemprop="description"]'),
        first_text(".recipe-description"),
        first_attr('meta[name="description"]', "content"),
    ],
    "image": [
        first_attr('[itemprop="image"]', "src"),
        first_attr('[itemprop="image"]', "content"),
        first_attr(".recipe-image img", "src"),
        first_attr('meta[property="og:image"]', "content"),
    ],
    "ingredients": [
        all_texts('[itemprop="recipeIngredient"], .ingredient, #ingredients li, .recipe__ingredients li'),
    ],
    "instructions": [
        all_texts('[itemprop="recipeInstructions"] li, .instruction, #instructions li, .recipe__steps li'),
        all_texts('[itemprop="recipeInstructions"] p, [itemprop="recipeInstructions"] div'),
    ],
}


def register_strategy(field: str, strategy, index: Optional[int] = None) -> None:
    """Add a strategy for field; appended unless index is given.

    The table is process-wide. Register site strategies at import time, not
    per request; use the `strategies` argument of `parse_html` for one-off
    overrides.
    """
    if field not in STRATEGIES:
        raise KeyError(f"Unknown recipe field: {field}")
    if index is None:
        STRATEGIES[field].append(strategy)
    else:
        STRATEGIES[field].insert(index, strategy)


def first_match(soup: BeautifulSoup, strategies: Sequence):
    """Value of the first strategy that returns something non-empty."""
    return next(
        (value for value in (strategy(soup) for strategy in strategies) if value),
        None,
    )


def parse_html(
    html: str,
    source_url: str = "",
    strategies: Optional[Mapping[str, Sequence]] = None,
) -> Recipe:
    """Best-effort Recipe from page markup. Always returns a record.

    Categories, times and servings are not recoverable here and stay at
    their defaults. An empty title means nothing usable was found.
    """
    table = {**STRATEGIES, **(strategies or {})}
    soup = BeautifulSoup(html or "", "html.parser")

    title = first_match(soup, table["title"]) or ""
    description = first_match(soup, table["description"]) or ""
    image = first_match(soup, table["image"])
    ingredients = first_match(soup, table["ingredients"]) or []
    instructions = first_match(soup, table["instructions"]) or []

    logger.debug(
        "HTML fallback: title=%r ingredients=%d instructions=%d",
        title, len(ingredients), len(instructions),
    )
    return Recipe(
        title=title,
        description=description,
        category=DEFAULT_CATEGORY,
        image_url=absolute_url(image, source_url),
        source_url=source_url or "",
        ingredients=[parse_ingredient_text(line) for line in ingredients],
        instructions=list(instructions),
        tags=[],
    )
