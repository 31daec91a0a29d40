from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.session import Base, utcnow


class JobStatus(str, Enum):
    NEW = "new"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"


class ChargeKind(str, Enum):
    LABOUR = "labour"
    PARTS = "parts"
    TRAVEL = "travel"
    OTHER = "other"


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("title <> ''", name="ck_jobs_title_nonempty"),
        Index("ix_jobs_org_scheduled_at", "org_id", "scheduled_at"),
        Index("ix_jobs_org_status", "org_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=JobStatus.NEW.value)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer: Mapped[Optional["Customer"]] = relationship("Customer", back_populates="jobs")
    note_entries: Mapped[List["JobNote"]] = relationship(
        "JobNote", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )
    charges: Mapped[List["JobCharge"]] = relationship(
        "JobCharge", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )
    hour_entries: Mapped[List["JobHours"]] = relationship(
        "JobHours", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )
    parts: Mapped[List["JobPart"]] = relationship(
        "JobPart", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )
    photos: Mapped[List["JobPhoto"]] = relationship(
        "JobPhoto", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )
    equipment_links: Mapped[List["JobEquipment"]] = relationship(
        "JobEquipment", back_populates="job", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"Job(id={self.id!r}, title={self.title!r}, job_type={self.job_type!r}, status={self.status!r})"


class JobNote(Base):
    __tablename__ = "job_notes"
    __table_args__ = (Index("ix_job_notes_job_org", "job_id", "org_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="note_entries")


class JobCharge(Base):
    __tablename__ = "job_charges"
    __table_args__ = (
        Index("ix_job_charges_job_org", "job_id", "org_id"),
        Index("ix_job_charges_kind", "kind"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False, default=ChargeKind.LABOUR.value)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="charges")

    def __repr__(self) -> str:
        return f"JobCharge(id={self.id!r}, description={self.description!r}, total={self.total!r})"


class JobHours(Base):
    __tablename__ = "job_hours"
    __table_args__ = (
        CheckConstraint("hours >= 0", name="ck_job_hours_nonnegative"),
        Index("ix_job_hours_job_org", "job_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="hour_entries")


class JobPart(Base):
    __tablename__ = "job_parts"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_job_parts_quantity_positive"),
        Index("ix_job_parts_job_org", "job_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    part_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="parts")


class JobPhoto(Base):
    """Photo metadata. The bytes live in object storage under ``url``."""

    __tablename__ = "job_photos"
    __table_args__ = (Index("ix_job_photos_job_org", "job_id", "org_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="photos")


class JobEquipment(Base):
    __tablename__ = "job_equipment"
    __table_args__ = (
        Index("ix_job_equipment_job_org", "job_id", "org_id"),
        Index("ix_job_equipment_equipment_id", "equipment_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    equipment_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    job: Mapped[Job] = relationship("Job", back_populates="equipment_links")
    equipment: Mapped["Equipment"] = relationship("Equipment")


# Late imports to avoid circular references.
from fieldops.models.directory import Customer, Equipment  # noqa: E402  # pylint: disable=wrong-import-position
