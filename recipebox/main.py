from typing import Any, Dict, Literal, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from recipebox.errors import ExtractionError, FetchError, InvalidInputError, RecipeImportError
from recipebox.models.recipe_schema import Ingredient
from recipebox.normalize.units import convert_ingredient
from recipebox.orchestrate.run import extract_file_text, text_to_recipe, url_to_recipe
from recipebox.settings import settings


class ImportRecipeRequest(BaseModel):
    url: Optional[str] = None


class ConvertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ingredient: Ingredient
    target_system: Literal["metric", "imperial"] = Field(alias="targetSystem")


app = FastAPI(title="Recipe Box import API")
# Backend used for /recipes/import/ocr; replace with an OCR engine adapter in deployment.
app.state.text_extractor = None


def _status_for(error: RecipeImportError) -> int:
    if isinstance(error, InvalidInputError):
        return 400
    if isinstance(error, FetchError):
        return 502
    if isinstance(error, ExtractionError):
        return 422
    return 400


@app.exception_handler(RecipeImportError)
async def import_error_handler(request: Request, exc: RecipeImportError):
    return JSONResponse(
        status_code=_status_for(exc),
        content={"success": False, "error": exc.summary, "message": exc.message, "cause": exc.cause},
    )


@app.post("/recipes/import")
def import_recipe(req: ImportRecipeRequest) -> Dict[str, Any]:
    """Import a recipe from a URL for review; nothing is saved."""
    if not req.url:
        raise InvalidInputError("URL is required")
    recipe = url_to_recipe(req.url)
    return {"success": True, "data": recipe.to_record(), "message": "Recipe imported successfully"}


@app.post("/recipes/import/ocr")
async def import_recipe_from_file(request: Request) -> Dict[str, Any]:
    """Raw file bytes in the body, MIME type from Content-Type."""
    length = request.headers.get("content-length", "")
    # refuse before buffering the body
    if length.isdigit() and int(length) > settings.MAX_UPLOAD_BYTES:
        raise InvalidInputError(
            "File too large", cause=f"Maximum file size is {settings.MAX_UPLOAD_BYTES} bytes"
        )
    data = await request.body()
    text = extract_file_text(
        data, request.headers.get("content-type", ""), request.app.state.text_extractor
    )
    recipe = text_to_recipe(text)
    return {
        "success": True,
        "data": recipe.to_record(),
        "extractedText": text[:500],
        "message": "Recipe extracted successfully from file",
    }


@app.post("/recipes/convert")
def convert(req: ConvertRequest) -> Dict[str, Any]:
    """Display conversion of one ingredient; data is null when nothing changes."""
    return {"success": True, "data": convert_ingredient(req.ingredient, req.target_system)}
