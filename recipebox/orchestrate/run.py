"""Import orchestrators: URL -> Recipe and file/text -> Recipe.

Both return a fresh Recipe for the user to review; nothing is persisted here.
Failures are raised as RecipeImportError subclasses after logging the stage
they happened in.
"""

from __future__ import annotations

import logging
from typing import Optional

from recipebox.errors import ExtractionError, InvalidInputError, RecipeImportError
from recipebox.ingest.extract_text import PlainTextExtractor, TextExtractor, normalize_mime_type
from recipebox.ingest.fetch import fetch_url, validate_url
from recipebox.ingest.html_fallback import parse_html
from recipebox.ingest.jsonld import parse_json_ld
from recipebox.ingest.text_parser import UNTITLED, parse_recipe_from_text
from recipebox.models.recipe_schema import Recipe
from recipebox.settings import settings

logger = logging.getLogger(__name__)


def html_to_recipe(html: str, source_url: str = "") -> Recipe:
    """JSON-LD first, then page markup. Raises ExtractionError without a title."""
    recipe = parse_json_ld(html, source_url)
    if recipe is None:
        logger.info("No JSON-LD recipe; falling back to HTML markup | url=%s", source_url)
        recipe = parse_html(html, source_url)
    if not recipe.title:
        raise ExtractionError("Could not extract recipe data from this URL")
    return recipe


def url_to_recipe(url: str, timeout: Optional[float] = None) -> Recipe:
    """Validate, fetch and extract a recipe from a web page."""
    stage = "validate"
    logger.info("Import start | url=%s", url)
    try:
        url = validate_url(url)

        stage = "fetch"
        html, final_url = fetch_url(url, timeout=timeout)
        if final_url != url:
            logger.debug("Redirected %s -> %s", url, final_url)

        stage = "extract"
        # attribution stays with the URL the user asked for
        recipe = html_to_recipe(html, url)
    except RecipeImportError as e:
        logger.warning("Import failed | url=%s stage=%s error=%s", url, stage, e)
        raise

    logger.info(
        "Import success | url=%s title=%s ingredients=%d",
        url, recipe.title, len(recipe.ingredients),
    )
    return recipe


def text_to_recipe(text: str) -> Recipe:
    """Parse already-extracted text. Raises ExtractionError when nothing usable is found."""
    if not text or not text.strip():
        raise ExtractionError(
            "No text could be extracted from the file",
            cause="The file may be blank, corrupted, or not contain readable text",
        )
    recipe = parse_recipe_from_text(text)
    if not recipe.title or recipe.title == UNTITLED:
        raise ExtractionError(
            "Could not extract recipe data from this file",
            cause="The file does not appear to contain a valid recipe.",
        )
    return recipe


def extract_file_text(
    data: bytes,
    mime_type: str,
    extractor: Optional[TextExtractor] = None,
) -> str:
    """Validate an upload and hand it to the text-extraction backend."""
    extractor = extractor or PlainTextExtractor()
    mime = normalize_mime_type(mime_type)
    if not data:
        raise InvalidInputError("No file uploaded")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise InvalidInputError(
            "File too large",
            cause=f"Maximum file size is {settings.MAX_UPLOAD_BYTES} bytes",
        )
    supported = extractor.supported_types()
    if mime not in supported:
        raise InvalidInputError(
            f"File type {mime or 'unknown'} is not supported by {extractor.name}",
            cause="Supported types: " + ", ".join(supported),
        )
    text = extractor.extract_text(data, mime)
    logger.info("Extracted %d characters from file | backend=%s", len(text or ""), extractor.name)
    return text


def file_to_recipe(
    data: bytes,
    mime_type: str,
    extractor: Optional[TextExtractor] = None,
) -> Recipe:
    """Extract text from an uploaded file with the given backend and parse it."""
    stage = "extract"
    logger.info("File import start | mime=%s bytes=%d", mime_type, len(data or b""))
    try:
        text = extract_file_text(data, mime_type, extractor)

        stage = "parse"
        recipe = text_to_recipe(text)
    except RecipeImportError as e:
        logger.warning("File import failed | mime=%s stage=%s error=%s", mime_type, stage, e)
        raise

    logger.info(
        "File import success | title=%s ingredients=%d instructions=%d",
        recipe.title, len(recipe.ingredients), len(recipe.instructions),
    )
    return recipe
