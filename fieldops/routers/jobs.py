from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from fieldops.db.session import get_db
from fieldops.deps.auth import api_auth
from fieldops.deps.context import RequestContext, require_context
from fieldops.schemas.jobs import CompleteJobResponse, CompletedJobOut, CompletedJobSummary
from fieldops.services.completion import complete_job as svc_complete_job
from fieldops.services.errors import CompletedJobNotFound, InvalidIdentifier, JobNotFound, TransactionFailure
from fieldops.services.history import delete_completed_job, get_completed_job, list_completed_jobs

router = APIRouter(prefix="/api/jobs", tags=["jobs"], dependencies=[Depends(api_auth)])


@router.get("/completed", response_model=List[CompletedJobSummary])
def completed_jobs(
    customer_id: Optional[uuid.UUID] = None,
    limit: int = Query(default=50, ge=1, le=500),
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    return list_completed_jobs(db, ctx, customer_id=customer_id, limit=limit)


@router.get("/completed/{completed_job_id}", response_model=CompletedJobOut)
def completed_job_detail(
    completed_job_id: str,
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    try:
        return get_completed_job(db, ctx, completed_job_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CompletedJobNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/completed/{completed_job_id}")
def remove_completed_job(
    completed_job_id: str,
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    try:
        deleted_id = delete_completed_job(db, ctx, completed_job_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CompletedJobNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"ok": True, "deleted_id": str(deleted_id)}


@router.post("/{job_id}/complete", response_model=CompleteJobResponse, status_code=status.HTTP_200_OK)
def complete_job(
    job_id: str,
    ctx: RequestContext = Depends(require_context),
    db: Session = Depends(get_db),
):
    try:
        result = svc_complete_job(db, ctx, job_id)
    except InvalidIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except JobNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TransactionFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return CompleteJobResponse(completed_job_id=result.completed_job_id, completed_at=result.completed_at)
