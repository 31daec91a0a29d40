from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import HTTPException, Request, status


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Tenant and actor for one request, resolved once and passed into services."""

    org_id: uuid.UUID
    actor_id: str | None = None


async def require_context(request: Request) -> RequestContext:
    cached = getattr(request.state, "context", None)
    if isinstance(cached, RequestContext):
        return cached

    raw_org = request.headers.get("X-Org-Id") or request.headers.get("x-org-id")
    if not raw_org:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No organization in request")
    try:
        org_id = uuid.UUID(raw_org.strip())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid organization id") from exc

    actor_id = (request.headers.get("X-Actor-Id") or "").strip() or None
    context = RequestContext(org_id=org_id, actor_id=actor_id)
    request.state.context = context
    return context
