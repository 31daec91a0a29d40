"""
Job completion: moving a live job into the archive.

``complete_job`` is the single entry point. Everything after the initial lookup runs inside
one unit of work: archive header, child copies, follow-up scheduling, then deletion of the
live rows. Deleting the live job is the last write, so a repeat call for the same job finds
nothing and gets ``JobNotFound`` instead of a second archive.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.db.session import unit_of_work, utcnow
from fieldops.deps.context import RequestContext
from fieldops.models.archive import CompletedJob
from fieldops.models.directory import Customer
from fieldops.models.jobs import Job
from fieldops.services.archive import CHILD_KINDS, migrate_children, purge_children
from fieldops.services.errors import CompletionError, JobNotFound, TransactionFailure, parse_identifier
from fieldops.services.recurring import FollowUpOutcome, linked_equipment, schedule_follow_ups

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CompletionResult:
    completed_job_id: uuid.UUID
    completed_at: datetime
    original_job_id: uuid.UUID
    migrated: Dict[str, int] = field(default_factory=dict)
    follow_up_job_ids: List[uuid.UUID] = field(default_factory=list)


def _load_job(db: Session, job_id: uuid.UUID, org_id: uuid.UUID) -> Job:
    job = db.execute(select(Job).where(Job.id == job_id, Job.org_id == org_id)).scalars().first()
    if not job:
        raise JobNotFound(job_id)
    return job


def _customer_name(db: Session, job: Job) -> Optional[str]:
    if job.customer_id is None:
        return None
    return db.execute(
        select(Customer.name).where(Customer.id == job.customer_id, Customer.org_id == job.org_id)
    ).scalar_one_or_none()


def _snapshot_job(job: Job, *, customer_name: Optional[str], completed_at: datetime, actor_id: Optional[str]) -> CompletedJob:
    return CompletedJob(
        org_id=job.org_id,
        original_job_id=job.id,
        customer_id=job.customer_id,
        customer_name=customer_name,
        title=job.title,
        description=job.description,
        job_type=job.job_type,
        notes=job.notes,
        scheduled_at=job.scheduled_at,
        completed_at=completed_at,
        completed_by=actor_id,
        original_created_by=job.created_by,
        original_created_at=job.created_at,
    )


def _delete_live_job(db: Session, job: Job) -> None:
    for kind in CHILD_KINDS:
        purge_children(db, kind, job=job)
    result = db.execute(delete(Job).where(Job.id == job.id, Job.org_id == job.org_id))
    if result.rowcount != 1:
        # Another request completed or deleted the job since we loaded it.
        raise JobNotFound(job.id)


def complete_job(
    db: Session,
    ctx: RequestContext,
    job_id: object,
    *,
    completed_at: Optional[datetime] = None,
) -> CompletionResult:
    job_uuid = parse_identifier(job_id, label="job id")
    job = _load_job(db, job_uuid, ctx.org_id)
    customer_name = _customer_name(db, job)
    completed_at = completed_at or utcnow()
    log.info("completing job %s for org %s", job_uuid, ctx.org_id)

    try:
        with unit_of_work(db):
            archive = _snapshot_job(
                job, customer_name=customer_name, completed_at=completed_at, actor_id=ctx.actor_id
            )
            db.add(archive)
            db.flush()

            migrated = {
                kind.name: migrate_children(db, kind, job=job, archive=archive) for kind in CHILD_KINDS
            }

            follow_ups = FollowUpOutcome()
            if settings.is_maintenance_type(job.job_type):
                follow_ups = schedule_follow_ups(
                    db,
                    job,
                    linked_equipment(db, job),
                    completed_at=completed_at,
                    actor_id=ctx.actor_id,
                )

            _delete_live_job(db, job)
            completed_job_id = archive.id
    except CompletionError:
        raise
    except Exception as exc:
        log.exception("completion of job %s rolled back", job_uuid)
        raise TransactionFailure(f"Completing job {job_uuid} failed; nothing was changed") from exc

    log.info(
        "job %s archived as %s (migrated=%s, follow_ups=%d, follow_up_failures=%d)",
        job_uuid,
        completed_job_id,
        migrated,
        len(follow_ups.scheduled_job_ids),
        len(follow_ups.failures),
    )
    return CompletionResult(
        completed_job_id=completed_job_id,
        completed_at=completed_at,
        original_job_id=job_uuid,
        migrated=migrated,
        follow_up_job_ids=list(follow_ups.scheduled_job_ids),
    )
