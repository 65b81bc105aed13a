"""Typer CLI for recipebox (import-url, import-file, convert, inspect-jsonld, serve)."""

from __future__ import annotations

import json
import mimetypes
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from recipebox.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("charset_normalizer").setLevel(logging.WARNING)

from recipebox.errors import RecipeImportError
from recipebox.ingest.fetch import fetch_url
from recipebox.ingest.jsonld import find_recipe_object, iter_json_ld_blocks
from recipebox.models.recipe_schema import Recipe
from recipebox.normalize.duration import format_minutes
from recipebox.normalize.units import convert_ingredient
from recipebox.orchestrate import run as orchestrator
from recipebox.settings import validate_settings

app = typer.Typer()
console = Console()


@app.callback()
def main():
    """Import recipes from web pages and text files for review."""
    try:
        validate_settings()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


def _show(recipe: Recipe, as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps(recipe.to_record(), ensure_ascii=False))
        return
    console.print(f"[bold]{recipe.title}[/bold] ({recipe.category})")
    if recipe.description:
        console.print(recipe.description)
    console.print(
        f"Prep {format_minutes(recipe.prep_time)} | Cook {format_minutes(recipe.cook_time)}"
        f" | Servings {recipe.servings or '-'}"
    )
    table = Table("Quantity", "Unit", "Ingredient")
    for ing in recipe.ingredients:
        table.add_row(ing.quantity, ing.unit, ing.name)
    console.print(table)
    for n, step in enumerate(recipe.instructions, start=1):
        console.print(f"{n}. {step}", markup=False)
    if recipe.source_url:
        console.print(f"Source: {recipe.source_url}")


@app.command("import-url")
def import_url(url: str, as_json: bool = typer.Option(False, "--json", help="Print the raw record")):
    """Import a recipe from a web page and print it for review."""
    try:
        recipe = orchestrator.url_to_recipe(url)
    except RecipeImportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    _show(recipe, as_json)


@app.command("import-file")
def import_file(
    path: Path,
    mime: Optional[str] = typer.Option(None, help="MIME type; guessed from the file name if omitted"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw record"),
):
    """Import a recipe from a text file."""
    mime_type = mime or mimetypes.guess_type(str(path))[0] or "text/plain"
    try:
        recipe = orchestrator.file_to_recipe(path.read_bytes(), mime_type)
    except (RecipeImportError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    _show(recipe, as_json)


@app.command()
def convert(
    quantity: str,
    unit: str,
    to: str = typer.Option("metric", "--to", help="metric or imperial"),
):
    """Show an ingredient amount in the other unit system."""
    if to not in ("metric", "imperial"):
        console.print(f"[red]Error:[/red] unknown unit system {to!r}")
        raise typer.Exit(code=1)
    result = convert_ingredient({"quantity": quantity, "unit": unit, "name": ""}, to)
    if result is None:
        console.print(f"{quantity} {unit} (no conversion)")
    else:
        console.print(f"{result['quantity']} {result['unit']}")


@app.command("inspect-jsonld")
def inspect_jsonld(url: str, limit: int = 10):
    """List the JSON-LD blocks on a page and whether each holds a Recipe."""
    try:
        html, _ = fetch_url(url)
    except RecipeImportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    blocks = list(iter_json_ld_blocks(html))
    console.print(f"Found {len(blocks)} JSON-LD blocks")
    for i, block in enumerate(blocks[:limit]):
        if not block.ok:
            console.print(f"--- block {i} [red]invalid[/red]: {block.error}")
            continue
        has_recipe = find_recipe_object(block.data) is not None
        console.print(f"--- block {i} recipe={has_recipe}")
        console.print(json.dumps(block.data, indent=2, ensure_ascii=False)[:1000], markup=False)


@app.command()
def serve(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Run the import API (recipebox.main:app) with uvicorn."""
    uvicorn.run("recipebox.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
