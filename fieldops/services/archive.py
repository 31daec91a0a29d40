"""
Copying a job's child rows into the archive tables.

One ``ChildKind`` describes one live table and its archive mirror. ``migrate_children`` copies
rows for a single kind; it never deletes, so a failure part way through a completion can
still roll back with nothing destroyed. ``purge_children`` removes the live rows once every
kind has been copied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fieldops.db.session import Base
from fieldops.models.archive import (
    CompletedJob,
    CompletedJobCharge,
    CompletedJobEquipment,
    CompletedJobHours,
    CompletedJobNote,
    CompletedJobPart,
    CompletedJobPhoto,
)
from fieldops.models.directory import Equipment
from fieldops.models.jobs import Job, JobCharge, JobEquipment, JobHours, JobNote, JobPart, JobPhoto

SnapshotFn = Callable[[Session, Base], Dict[str, object]]


@dataclass(frozen=True, slots=True)
class ChildKind:
    name: str
    live_model: Type[Base]
    archive_model: Type[Base]
    fields: Tuple[str, ...]
    snapshot: Optional[SnapshotFn] = None


def _equipment_snapshot(db: Session, link: JobEquipment) -> Dict[str, object]:
    name = db.execute(
        select(Equipment.name).where(Equipment.id == link.equipment_id, Equipment.org_id == link.org_id)
    ).scalar_one_or_none()
    return {"equipment_name": name}


NOTES = ChildKind("notes", JobNote, CompletedJobNote, ("text", "created_at"))
CHARGES = ChildKind(
    "charges",
    JobCharge,
    CompletedJobCharge,
    ("kind", "description", "quantity", "unit_price", "total", "created_at"),
)
HOURS = ChildKind("hours", JobHours, CompletedJobHours, ("hours", "description", "created_at"))
PARTS = ChildKind("parts", JobPart, CompletedJobPart, ("part_name", "quantity", "created_at"))
# Only the storage key moves; the bytes stay where they are.
PHOTOS = ChildKind("photos", JobPhoto, CompletedJobPhoto, ("url", "created_at"))
EQUIPMENT = ChildKind(
    "equipment",
    JobEquipment,
    CompletedJobEquipment,
    ("equipment_id", "created_at"),
    snapshot=_equipment_snapshot,
)

CHILD_KINDS: Tuple[ChildKind, ...] = (NOTES, CHARGES, HOURS, PARTS, PHOTOS, EQUIPMENT)


def _live_rows_stmt(kind: ChildKind, job: Job):
    model = kind.live_model
    return (
        select(model)
        .where(model.job_id == job.id, model.org_id == job.org_id)
        .order_by(model.created_at.asc(), model.id.asc())
    )


def migrate_children(db: Session, kind: ChildKind, *, job: Job, archive: CompletedJob) -> int:
    """Mirror every live row of ``kind`` for ``job`` under ``archive``. Returns the row count."""
    rows = db.execute(_live_rows_stmt(kind, job)).scalars().all()
    for row in rows:
        values = {field: getattr(row, field) for field in kind.fields}
        if kind.snapshot is not None:
            values.update(kind.snapshot(db, row))
        db.add(
            kind.archive_model(
                completed_job_id=archive.id,
                original_job_id=job.id,
                org_id=job.org_id,
                **values,
            )
        )
    db.flush()
    return len(rows)


def purge_children(db: Session, kind: ChildKind, *, job: Job) -> int:
    model = kind.live_model
    result = db.execute(delete(model).where(model.job_id == job.id, model.org_id == job.org_id))
    return result.rowcount or 0
