from __future__ import annotations

import hmac
import logging

from fastapi import HTTPException, Request, status

from fieldops.core.config import settings

log = logging.getLogger(__name__)


def _extract_token(request: Request) -> str | None:
    token = request.headers.get("X-API-Key")
    if token:
        return token.strip()
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip()
    return None


async def api_auth(request: Request) -> None:
    """Shared-token gate. Disabled when API_TOKEN is not configured."""
    expected = settings.API_TOKEN
    if not expected:
        return
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")
    if not hmac.compare_digest(token, expected):
        log.warning("AUTH: rejected token for %s %s", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
