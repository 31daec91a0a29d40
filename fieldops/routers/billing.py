from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fieldops.db.session import get_db
from fieldops.deps.auth import api_auth
from fieldops.deps.context import RequestContext, require_context
from fieldops.schemas.billing import InvoiceConversionResponse, InvoiceOut
from fieldops.services.billing import convert_to_invoice
from fieldops.services.errors import BillingError, CompletedJobNotFound, InvalidIdentifier

router = APIRouter(prefix="/api/jobs", tags=["billing"], dependencies=[Depends(api_auth)])


@router.post("/completed/{completed_job_id}/invoice", response_model=InvoiceConversionResponse)
def create_invoice_from_completed_job(
    completed_job_id: str,
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    try:
        result = convert_to_invoice(db, ctx, completed_job_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CompletedJobNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except BillingError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return InvoiceConversionResponse(
        created=result.created,
        invoice=InvoiceOut.model_validate(result.invoice),
    )
