"""Turn plain recipe text (OCR output, PDF text, pasted text) into a Recipe.

There is no markup to anchor on, so sections are found from headings
("Ingredients:", "Method") and list markers. Unparsable input degrades to
empty fields; it never raises.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from recipebox.models.recipe_schema import Ingredient, Recipe
from recipebox.normalize.category import DEFAULT_CATEGORY
from recipebox.normalize.duration import (
    derive_additional_time,
    extract_labeled_time,
    extract_servings,
)
from recipebox.normalize.ingredients import (
    has_list_marker,
    parse_ingredient_text_lenient,
    strip_list_marker,
)

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Recipe"
DESCRIPTION_LIMIT = 500

INGREDIENTS_HEADING = re.compile(r"^(ingredients?|what you need):?$", re.I)
INSTRUCTIONS_HEADING = re.compile(r"^(instructions?|directions?|method|steps?|preparation):?$", re.I)
TITLE_SKIP_HEADING = re.compile(r"^(ingredients?|directions?|instructions?|method|steps?):?$", re.I)
INGREDIENT_SKIP_HEADING = re.compile(r"^(ingredients?|instructions?|directions?):?$", re.I)
END_OF_INSTRUCTIONS = re.compile(r"^(notes?|tips?|nutrition|source):?$", re.I)
METADATA_LINE = re.compile(r"^(prep|cook|total|serves?|yield|makes?)", re.I)
TITLE_PREFIX = re.compile(r"^(recipe|title):?\s*", re.I)
# e.g. "CETTE a": a shouted word followed by one stray letter
OCR_SHOUT_NOISE = re.compile(r"^[A-Z]{2,}\s+[a-z]$")


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n")]


def _find(lines: List[str], pattern: re.Pattern, start: int = 0) -> int:
    return next((i for i in range(start, len(lines)) if pattern.match(lines[i])), -1)


def _is_title_candidate(line: str) -> bool:
    if len(line) < 3:
        return False
    if not re.search(r"[a-zA-Z]", line):
        return False
    if OCR_SHOUT_NOISE.match(line):
        return False
    if all(len(word) <= 2 for word in line.split()):
        return False
    if TITLE_SKIP_HEADING.match(line):
        return False
    return True


def extract_title(lines: List[str]) -> Tuple[str, int]:
    """Title and its line index; (UNTITLED, -1) when no line qualifies."""
    index = next((i for i, line in enumerate(lines) if _is_title_candidate(line)), -1)
    if index == -1:
        return UNTITLED, -1
    title = TITLE_PREFIX.sub("", lines[index], count=1).strip()
    return title or UNTITLED, index


def extract_description(lines: List[str], title_index: int) -> str:
    ingredients_index = _find(lines, INGREDIENTS_HEADING)
    if title_index == -1 or ingredients_index <= title_index + 1:
        return ""
    kept = [
        line
        for line in lines[title_index + 1:ingredients_index]
        if line and not METADATA_LINE.match(line)
    ]
    return " ".join(kept)[:DESCRIPTION_LIMIT]


def parse_ingredient_lines(lines: List[str]) -> List[Ingredient]:
    ingredients = []
    for line in lines:
        if not line or INGREDIENT_SKIP_HEADING.match(line):
            continue
        cleaned = strip_list_marker(line)
        if cleaned:
            ingredients.append(parse_ingredient_text_lenient(cleaned))
    return ingredients


def extract_ingredients(lines: List[str]) -> List[Ingredient]:
    start = _find(lines, INGREDIENTS_HEADING)
    if start == -1:
        return parse_ingredient_lines(lines)
    end = _find(lines, INSTRUCTIONS_HEADING, start + 1)
    return parse_ingredient_lines(lines[start + 1:end if end != -1 else len(lines)])


def parse_instruction_lines(lines: List[str]) -> List[str]:
    """Group lines into steps.

    A blank line or an explicit bullet/number starts a new step; other lines
    are wrapped continuations of the current step.
    """
    steps: List[str] = []
    current: List[str] = []
    after_blank = False
    for line in lines:
        if not line:
            after_blank = True
            continue
        if END_OF_INSTRUCTIONS.match(line):
            break
        cleaned = strip_list_marker(line)
        if not cleaned:
            continue
        if (after_blank or has_list_marker(line)) and current:
            steps.append(" ".join(current))
            current = []
        current.append(cleaned)
        after_blank = False
    if current:
        steps.append(" ".join(current))
    return steps


def extract_instructions(lines: List[str]) -> List[str]:
    start = _find(lines, INSTRUCTIONS_HEADING)
    if start != -1:
        return parse_instruction_lines(lines[start + 1:])

    ingredients_index = _find(lines, INGREDIENTS_HEADING)
    if ingredients_index == -1:
        return []
    after = lines[ingredients_index + 1:]
    # first long line without a list marker is taken as the start of the method
    begin = next(
        (i for i, line in enumerate(after) if len(line) > 20 and not re.match(r"^[-•*\d]", line)),
        -1,
    )
    if begin == -1:
        return []
    return parse_instruction_lines(after[begin:])


def parse_recipe_from_text(text: Optional[str]) -> Recipe:
    """Heuristic Recipe from raw extracted text."""
    clean = text.strip() if isinstance(text, str) else ""
    if not clean:
        logger.debug("No text to parse; returning empty recipe")
        return Recipe(title=UNTITLED, category=DEFAULT_CATEGORY)

    lines = _lines(clean)
    title, title_index = extract_title(lines)
    prep = extract_labeled_time(clean, "prep")
    cook = extract_labeled_time(clean, "cook")
    total = extract_labeled_time(clean, "total")

    recipe = Recipe(
        title=title,
        description=extract_description(lines, title_index),
        category=DEFAULT_CATEGORY,
        prep_time=prep,
        cook_time=cook,
        additional_time=derive_additional_time(total, prep, cook),
        servings=extract_servings(clean),
        ingredients=extract_ingredients(lines),
        instructions=extract_instructions(lines),
    )
    logger.debug(
        "Parsed text recipe: title=%r ingredients=%d instructions=%d",
        recipe.title, len(recipe.ingredients), len(recipe.instructions),
    )
    return recipe
