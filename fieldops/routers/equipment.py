from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fieldops.db.session import get_db
from fieldops.deps.auth import api_auth
from fieldops.deps.context import RequestContext, require_context
from fieldops.schemas.jobs import ServiceHistoryOut
from fieldops.services.errors import EquipmentNotFound, InvalidIdentifier
from fieldops.services.history import equipment_service_history

router = APIRouter(prefix="/api/equipment", tags=["equipment"], dependencies=[Depends(api_auth)])


@router.get("/{equipment_id}/service-history", response_model=ServiceHistoryOut)
def service_history(
    equipment_id: str,
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    try:
        history = equipment_service_history(db, ctx, equipment_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EquipmentNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ServiceHistoryOut.model_validate(history)
