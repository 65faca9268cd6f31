"""Authorization check applied to catalog mutations."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..config import Settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
API_KEY_PARAM = "api_key"


def supplied_api_key(
    headers: Mapping[str, str],
    query: Mapping[str, str],
    body: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Return the caller's key from the header, query string or body, in that order."""

    key = headers.get(API_KEY_HEADER) or query.get(API_KEY_PARAM)
    if not key and isinstance(body, Mapping):
        key = body.get(API_KEY_PARAM)
    return key or None


def is_same_origin(headers: Mapping[str, str]) -> bool:
    referer = headers.get("referer") or ""
    host = headers.get("host") or ""
    return bool(referer and host and host in referer)


def is_authorized(
    headers: Mapping[str, str],
    query: Mapping[str, str],
    body: Optional[Mapping[str, Any]],
    settings: Settings,
) -> bool:
    """Decide whether a non-GET request may proceed.

    ``headers`` must be case-insensitive or use lower-case names, as
    Starlette's ``Headers`` do.
    """

    if settings.permissive:
        logger.info("Development mode: skipping API key validation")
        return True

    if is_same_origin(headers):
        logger.info("Same origin request detected, allowing access")
        return True

    if not settings.api_key:
        return False
    return supplied_api_key(headers, query, body) == settings.api_key
