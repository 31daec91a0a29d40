"""
Archive tables for completed jobs.

Each child table mirrors its live counterpart in ``fieldops.models.jobs`` plus the three
linking columns ``completed_job_id``, ``original_job_id`` and ``org_id``. References to live
rows (customer, equipment, original job) are plain UUID columns rather than foreign keys so
that deleting or renaming the live row never rewrites history.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.session import Base, utcnow


class CompletedJob(Base):
    __tablename__ = "completed_jobs"
    __table_args__ = (
        Index("ix_completed_jobs_org_completed_at", "org_id", "completed_at"),
        Index("ix_completed_jobs_original_job_id", "original_job_id"),
        Index("ix_completed_jobs_org_customer", "org_id", "customer_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    completed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    original_created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    original_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    note_entries: Mapped[List["CompletedJobNote"]] = relationship(
        "CompletedJobNote",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobNote.created_at",
    )
    charges: Mapped[List["CompletedJobCharge"]] = relationship(
        "CompletedJobCharge",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobCharge.created_at",
    )
    hour_entries: Mapped[List["CompletedJobHours"]] = relationship(
        "CompletedJobHours",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobHours.created_at",
    )
    parts: Mapped[List["CompletedJobPart"]] = relationship(
        "CompletedJobPart",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobPart.created_at",
    )
    photos: Mapped[List["CompletedJobPhoto"]] = relationship(
        "CompletedJobPhoto",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobPhoto.created_at",
    )
    equipment_links: Mapped[List["CompletedJobEquipment"]] = relationship(
        "CompletedJobEquipment",
        back_populates="completed_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CompletedJobEquipment.equipment_name",
    )

    def __repr__(self) -> str:
        return (
            f"CompletedJob(id={self.id!r}, original_job_id={self.original_job_id!r}, "
            f"title={self.title!r}, completed_at={self.completed_at!r})"
        )


class CompletedJobNote(Base):
    __tablename__ = "completed_job_notes"
    __table_args__ = (
        Index("ix_completed_job_notes_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_notes_original_job_id", "original_job_id"),
        Index("ix_completed_job_notes_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="note_entries")


class CompletedJobCharge(Base):
    __tablename__ = "completed_job_charges"
    __table_args__ = (
        Index("ix_completed_job_charges_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_charges_original_job_id", "original_job_id"),
        Index("ix_completed_job_charges_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="charges")


class CompletedJobHours(Base):
    __tablename__ = "completed_job_hours"
    __table_args__ = (
        Index("ix_completed_job_hours_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_hours_original_job_id", "original_job_id"),
        Index("ix_completed_job_hours_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="hour_entries")


class CompletedJobPart(Base):
    __tablename__ = "completed_job_parts"
    __table_args__ = (
        Index("ix_completed_job_parts_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_parts_original_job_id", "original_job_id"),
        Index("ix_completed_job_parts_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    part_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="parts")


class CompletedJobPhoto(Base):
    __tablename__ = "completed_job_photos"
    __table_args__ = (
        Index("ix_completed_job_photos_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_photos_original_job_id", "original_job_id"),
        Index("ix_completed_job_photos_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="photos")


class CompletedJobEquipment(Base):
    __tablename__ = "completed_job_equipment"
    __table_args__ = (
        Index("ix_completed_job_equipment_completed_job_id", "completed_job_id"),
        Index("ix_completed_job_equipment_equipment_id", "equipment_id"),
        Index("ix_completed_job_equipment_org_id", "org_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    completed_job_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="CASCADE"), nullable=False
    )
    original_job_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    equipment_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    equipment_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    completed_job: Mapped[CompletedJob] = relationship("CompletedJob", back_populates="equipment_links")
