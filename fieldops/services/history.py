from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from fieldops.db.session import unit_of_work
from fieldops.deps.context import RequestContext
from fieldops.models.archive import CompletedJob, CompletedJobEquipment
from fieldops.models.directory import Equipment
from fieldops.services.errors import CompletedJobNotFound, EquipmentNotFound, parse_identifier

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceVisit:
    completed_job_id: uuid.UUID
    title: str
    job_type: Optional[str]
    completed_at: datetime
    equipment_name: Optional[str]


@dataclass(slots=True)
class ServiceHistory:
    equipment: Equipment
    visits: List[ServiceVisit]


def list_completed_jobs(
    db: Session,
    ctx: RequestContext,
    *,
    customer_id: Optional[uuid.UUID] = None,
    limit: int = 50,
) -> Sequence[CompletedJob]:
    stmt = (
        select(CompletedJob)
        .where(CompletedJob.org_id == ctx.org_id)
        .order_by(CompletedJob.completed_at.desc(), CompletedJob.id.asc())
        .limit(limit)
    )
    if customer_id:
        stmt = stmt.where(CompletedJob.customer_id == customer_id)
    return db.execute(stmt).scalars().all()


def get_completed_job(db: Session, ctx: RequestContext, completed_job_id: object) -> CompletedJob:
    archive_id = parse_identifier(completed_job_id, label="completed job id")
    stmt = (
        select(CompletedJob)
        .where(CompletedJob.id == archive_id, CompletedJob.org_id == ctx.org_id)
        .options(
            selectinload(CompletedJob.note_entries),
            selectinload(CompletedJob.charges),
            selectinload(CompletedJob.hour_entries),
            selectinload(CompletedJob.parts),
            selectinload(CompletedJob.photos),
            selectinload(CompletedJob.equipment_links),
        )
    )
    archive = db.execute(stmt).scalars().first()
    if not archive:
        raise CompletedJobNotFound(archive_id)
    return archive


def delete_completed_job(db: Session, ctx: RequestContext, completed_job_id: object) -> uuid.UUID:
    """Archive maintenance: drop one completed job and its child rows."""
    archive = get_completed_job(db, ctx, completed_job_id)
    archive_id = archive.id
    with unit_of_work(db):
        db.delete(archive)
    log.info("completed job %s deleted by %s", archive_id, ctx.actor_id)
    return archive_id


def equipment_service_history(db: Session, ctx: RequestContext, equipment_id: object) -> ServiceHistory:
    eq_id = parse_identifier(equipment_id, label="equipment id")
    equipment = (
        db.execute(select(Equipment).where(Equipment.id == eq_id, Equipment.org_id == ctx.org_id))
        .scalars()
        .first()
    )
    if not equipment:
        raise EquipmentNotFound(eq_id)

    # One visit per completed job, even when it linked the same equipment more than once.
    stmt = (
        select(CompletedJob, func.max(CompletedJobEquipment.equipment_name))
        .join(CompletedJobEquipment, CompletedJobEquipment.completed_job_id == CompletedJob.id)
        .where(
            CompletedJob.org_id == ctx.org_id,
            CompletedJobEquipment.org_id == ctx.org_id,
            CompletedJobEquipment.equipment_id == eq_id,
        )
        .group_by(CompletedJob.id)
        .order_by(CompletedJob.completed_at.desc(), CompletedJob.id.asc())
    )
    visits = [
        ServiceVisit(
            completed_job_id=archive.id,
            title=archive.title,
            job_type=archive.job_type,
            completed_at=archive.completed_at,
            equipment_name=equipment_name,
        )
        for archive, equipment_name in db.execute(stmt)
    ]
    return ServiceHistory(equipment=equipment, visits=visits)
