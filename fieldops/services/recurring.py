"""
Follow-up scheduling for maintenance work.

When a maintenance job completes, every linked piece of equipment with a service interval
gets one new job booked ``service_interval_months`` calendar months after the completion,
and its last/next service dates are moved forward. Items are handled one at a time inside
their own savepoint. A failing item is logged and skipped; it never aborts the others or
the archive transaction around them.
"""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.models.directory import Equipment
from fieldops.models.jobs import Job, JobEquipment
from fieldops.services.errors import FollowUpItemFailure

log = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def add_months(value: DateLike, months: int) -> DateLike:
    """Calendar-month arithmetic; the day is clamped to the end of a shorter target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


@dataclass(slots=True)
class FollowUpOutcome:
    scheduled_job_ids: List[uuid.UUID] = field(default_factory=list)
    skipped_equipment_ids: List[uuid.UUID] = field(default_factory=list)
    failures: List[FollowUpItemFailure] = field(default_factory=list)


def linked_equipment(db: Session, job: Job) -> Sequence[Equipment]:
    stmt = (
        select(Equipment)
        .join(JobEquipment, JobEquipment.equipment_id == Equipment.id)
        .where(
            JobEquipment.job_id == job.id,
            JobEquipment.org_id == job.org_id,
            Equipment.org_id == job.org_id,
        )
        .order_by(Equipment.name.asc(), Equipment.id.asc())
    )
    return db.execute(stmt).scalars().unique().all()


def _schedule_follow_up(
    db: Session,
    job: Job,
    equipment: Equipment,
    *,
    completed_at: datetime,
    actor_id: Optional[str],
) -> Job:
    next_visit = add_months(completed_at, equipment.service_interval_months)
    follow_up = Job(
        org_id=job.org_id,
        customer_id=job.customer_id,
        title=f"Service - {equipment.name}",
        description=f"Scheduled maintenance following completed job: {job.title} ({job.id})",
        job_type=job.job_type,
        status=settings.FOLLOW_UP_STATUS,
        scheduled_at=next_visit,
        created_by=actor_id,
    )
    db.add(follow_up)
    db.flush()
    db.add(JobEquipment(job_id=follow_up.id, org_id=job.org_id, equipment_id=equipment.id))

    equipment.last_service_date = completed_at.date()
    equipment.next_service_date = next_visit.date()
    db.add(equipment)
    db.flush()
    return follow_up


def schedule_follow_ups(
    db: Session,
    job: Job,
    equipment_items: Iterable[Equipment],
    *,
    completed_at: datetime,
    actor_id: Optional[str] = None,
) -> FollowUpOutcome:
    outcome = FollowUpOutcome()
    if not settings.is_maintenance_type(job.job_type):
        return outcome

    for item in equipment_items:
        if item.service_interval_months is None:
            outcome.skipped_equipment_ids.append(item.id)
            continue
        equipment_id = item.id
        try:
            with db.begin_nested():
                follow_up = _schedule_follow_up(
                    db, job, item, completed_at=completed_at, actor_id=actor_id
                )
        except Exception as exc:
            failure = FollowUpItemFailure(equipment_id, exc)
            log.warning(
                "follow-up skipped for equipment %s on job %s: %s",
                equipment_id,
                job.id,
                exc,
                exc_info=True,
            )
            outcome.failures.append(failure)
            continue
        outcome.scheduled_job_ids.append(follow_up.id)
        log.info(
            "follow-up job %s scheduled for equipment %s at %s",
            follow_up.id,
            equipment_id,
            follow_up.scheduled_at,
        )
    return outcome
