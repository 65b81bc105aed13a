"""Text-extraction backends for file imports.

OCR engines and PDF text extraction live outside this package. A backend is
anything with `supported_types()` and `extract_text(data, mime_type)`; the
OCR import only consumes the text it returns.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)


class TextExtractor(Protocol):
    name: str

    def supported_types(self) -> List[str]:
        ...

    def extract_text(self, data: bytes, mime_type: str) -> str:
        ...


class PlainTextExtractor:
    """Backend for uploads that already are text (pasted or exported recipes)."""

    name = "plain-text"

    def supported_types(self) -> List[str]:
        return ["text/plain"]

    def extract_text(self, data: bytes, mime_type: str) -> str:
        text = data.decode("utf-8", errors="replace")
        logger.debug("Extracted text length: %d", len(text))
        return text


def normalize_mime_type(mime_type: str | None) -> str:
    """Strip parameters and case: `Text/Plain; charset=utf-8` -> `text/plain`."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()
