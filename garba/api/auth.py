"""API key authentication for admin endpoints."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    request: Request,
    key: Optional[str] = Security(api_key_header),
) -> Optional[str]:
    """Validate the API key if one is configured.

    When GARBA_API_KEY is not set, all requests are allowed (open mode).
    When set, requests must include a matching X-API-Key header.
    """
    expected = request.app.state.settings.api_key
    if expected is None:
        return None
    if key is None or not secrets.compare_digest(key, expected):
        raise HTTPException(status_code=403, detail="Invalid or missing API key")
    return key
