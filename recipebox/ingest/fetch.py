"""HTTP fetcher for recipe pages."""

from __future__ import annotations

import logging
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests

from recipebox.errors import (
    FetchHTTPError,
    FetchTimeoutError,
    FetchUnreachableError,
    InvalidInputError,
)
from recipebox.settings import settings


logger = logging.getLogger(__name__)


def is_valid_url(url) -> bool:
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def absolute_url(value: Optional[str], base: str = "") -> str:
    """Resolve value against base; anything that is not http(s) afterwards is dropped."""
    if not value:
        return ""
    resolved = urljoin(base, value.strip()) if base else value.strip()
    return resolved if is_valid_url(resolved) else ""


def validate_url(url) -> str:
    """Return the trimmed URL or raise InvalidInputError before any I/O."""
    if not is_valid_url(url):
        raise InvalidInputError("Invalid URL format", cause=f"not an absolute http(s) URL: {url!r}")
    return url.strip()


def fetch_url(url: str, timeout: Optional[float] = None) -> Tuple[str, str]:
    """GET the url with UA header and a timeout. Returns (html, final_url).

    Single attempt. Timeouts, connection failures and non-2xx responses are
    raised as distinct FetchError subclasses.
    """
    url = validate_url(url)
    timeout = settings.FETCH_TIMEOUT if timeout is None else timeout
    headers = {"User-Agent": settings.USER_AGENT}
    logger.debug("Fetching URL: %s (timeout=%ss)", url, timeout)
    try:
        resp = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        resp.raise_for_status()
    except requests.Timeout as exc:
        raise FetchTimeoutError(
            "Request timeout - the website took too long to respond", cause=str(exc)
        ) from exc
    except requests.HTTPError as exc:
        response = exc.response
        status = response.status_code if response is not None else 0
        reason = (response.reason or "") if response is not None else ""
        raise FetchHTTPError(status, reason) from exc
    except requests.RequestException as exc:
        raise FetchUnreachableError(
            "Failed to fetch URL - please check the URL and try again", cause=str(exc)
        ) from exc
    logger.info("Fetched %s -> status %s", url, resp.status_code)
    return resp.text, resp.url
