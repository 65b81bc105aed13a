"""Error taxonomy for recipe imports.

Callers branch on the class: input problems are the caller's fault, fetch
problems may go away on a later attempt, extraction problems mean the input
itself has no recognisable recipe.
"""

from __future__ import annotations

from typing import Optional


class RecipeImportError(Exception):
    summary = "Failed to import recipe"

    def __init__(self, message: str, cause: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidInputError(RecipeImportError):
    summary = "Invalid import request"


class FetchError(RecipeImportError):
    summary = "Failed to import recipe"


class FetchTimeoutError(FetchError):
    pass


class FetchUnreachableError(FetchError):
    pass


class FetchHTTPError(FetchError):
    def __init__(self, status_code: int, reason: str = ""):
        super().__init__(f"Failed to fetch URL: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason


class ExtractionError(RecipeImportError):
    summary = "Could not extract recipe data"
