"""Schema.org Recipe extraction from JSON-LD script blocks."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Iterator, List, NamedTuple, Optional

from bs4 import BeautifulSoup

from recipebox.ingest.fetch import absolute_url
from recipebox.models.recipe_schema import Ingredient, Recipe
from recipebox.normalize.category import map_category
from recipebox.normalize.duration import derive_additional_time, parse_servings, parse_time
from recipebox.normalize.ingredients import parse_ingredient_text

logger = logging.getLogger(__name__)


class JsonLdBlock(NamedTuple):
    """Outcome of decoding one <script type="application/ld+json"> body."""

    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def iter_json_ld_blocks(html: str) -> Iterator[JsonLdBlock]:
    """Decode every JSON-LD script in document order; bad JSON yields a failed block."""
    soup = BeautifulSoup(html or "", "html.parser")
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        body = (script.string or script.get_text() or "").strip()
        if not body:
            yield JsonLdBlock(error="empty script body")
            continue
        try:
            yield JsonLdBlock(data=json.loads(body))
        except ValueError as exc:
            yield JsonLdBlock(error=str(exc))


def _is_recipe(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    node_type = node.get("@type")
    if isinstance(node_type, list):
        return "Recipe" in node_type
    return node_type == "Recipe"


def find_recipe_object(data: Any) -> Optional[dict]:
    """The Recipe node of one JSON-LD document: @graph member, array member or the document."""
    if isinstance(data, dict) and isinstance(data.get("@graph"), list):
        return next((item for item in data["@graph"] if _is_recipe(item)), None)
    if isinstance(data, list):
        return next((item for item in data if _is_recipe(item)), None)
    if _is_recipe(data):
        return data
    return None


def parse_image(image: Any) -> str:
    if not image:
        return ""
    if isinstance(image, str):
        return image
    if isinstance(image, dict):
        return image.get("url") or ""
    if isinstance(image, list) and image:
        first = image[0]
        if isinstance(first, str):
            return first
        if isinstance(first, dict):
            return first.get("url") or ""
    return ""


def parse_ingredients(ingredients: Any) -> List[Ingredient]:
    if not isinstance(ingredients, list):
        return []
    return [
        parse_ingredient_text(ing) if isinstance(ing, str) else Ingredient(name=str(ing))
        for ing in ingredients
    ]


def _instruction_text(item: Any) -> str:
    if isinstance(item, str):
        return item.strip()
    if not isinstance(item, dict):
        return ""
    if item.get("text"):
        return str(item["text"]).strip()
    children = item.get("itemListElement")
    if isinstance(children, list):
        # HowToSection: one step per section, child texts joined
        return " ".join(
            t for t in (_instruction_text(child) for child in children) if t
        )
    return ""


def parse_instructions(instructions: Any) -> List[str]:
    if not instructions:
        return []
    if isinstance(instructions, str):
        return [instructions.strip()]
    if isinstance(instructions, list):
        return [t for t in (_instruction_text(i) for i in instructions) if t]
    return []


def parse_tags(keywords: Any) -> List[str]:
    if not keywords:
        return []
    if isinstance(keywords, str):
        return [tag.strip() for tag in keywords.split(",") if tag.strip()]
    if isinstance(keywords, list):
        return [str(tag) for tag in keywords]
    return []


def recipe_from_json_ld(recipe: dict, source_url: str = "") -> Recipe:
    """Map a Schema.org Recipe node onto the import record."""
    prep = parse_time(recipe.get("prepTime"))
    cook = parse_time(recipe.get("cookTime"))
    total = parse_time(recipe.get("totalTime"))
    page_url = recipe.get("url")
    page_url = absolute_url(page_url, source_url) if isinstance(page_url, str) else ""
    resolved_source = page_url or absolute_url(source_url)
    return Recipe(
        title=str(recipe.get("name") or "").strip(),
        description=str(recipe.get("description") or "").strip(),
        category=map_category(recipe.get("recipeCategory")),
        prep_time=prep,
        cook_time=cook,
        additional_time=derive_additional_time(total, prep, cook),
        servings=parse_servings(recipe.get("recipeYield")),
        image_url=absolute_url(parse_image(recipe.get("image")), resolved_source),
        source_url=resolved_source,
        ingredients=parse_ingredients(recipe.get("recipeIngredient")),
        instructions=parse_instructions(recipe.get("recipeInstructions")),
        tags=parse_tags(recipe.get("keywords")),
    )


def _recipe_nodes(blocks: Iterable[JsonLdBlock]) -> Iterator[dict]:
    for index, block in enumerate(blocks):
        if not block.ok:
            logger.debug("Skipping JSON-LD block %d: %s", index, block.error)
            continue
        node = find_recipe_object(block.data)
        if node is not None:
            yield node


def parse_json_ld(html: str, source_url: str = "") -> Optional[Recipe]:
    """First Recipe found across the page's JSON-LD blocks, or None.

    source_url is the import URL; it becomes the record's sourceUrl when the
    structured data has no `url` of its own.
    """
    node = next(_recipe_nodes(iter_json_ld_blocks(html)), None)
    if node is None:
        return None
    recipe = recipe_from_json_ld(node, source_url)
    logger.info("JSON-LD recipe found: %s", recipe.title)
    return recipe
