from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.session import Base, utcnow


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class InvoiceSourceType(str, Enum):
    CHARGE = "charge"
    HOURS = "hours"
    PART = "part"


def _enum_values(enum_cls) -> List[str]:
    # Persist the lowercase values the migrations create, not the member names.
    return [member.value for member in enum_cls]


class ItemPreset(Base):
    """Current rate card entry, looked up by name when a completed job is invoiced."""

    __tablename__ = "item_presets"
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_item_presets_org_name"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    unit_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"ItemPreset(id={self.id!r}, name={self.name!r}, unit_amount={self.unit_amount!r})"


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("org_id", "original_job_id", name="uq_invoices_org_original_job"),
        Index("ix_invoices_org_status", "org_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    completed_job_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("completed_jobs.id", ondelete="SET NULL"), nullable=True
    )
    # NULL for invoices raised by hand; unique per org otherwise.
    original_job_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[InvoiceStatus] = mapped_column(
        SAEnum(InvoiceStatus, name="invoice_status", values_callable=_enum_values),
        nullable=False,
        default=InvoiceStatus.DRAFT,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="AUD")
    sub_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    tax_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    grand_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    lines: Mapped[List["InvoiceLine"]] = relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLine.position",
    )

    def __repr__(self) -> str:
        return f"Invoice(id={self.id!r}, original_job_id={self.original_job_id!r}, status={self.status!r})"


class InvoiceLine(Base):
    __tablename__ = "invoice_lines"
    __table_args__ = (Index("ix_invoice_lines_invoice_id", "invoice_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    invoice_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source_type: Mapped[InvoiceSourceType] = mapped_column(
        SAEnum(InvoiceSourceType, name="invoice_source_type", values_callable=_enum_values),
        nullable=False,
    )
    source_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=1)
    unit_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)
    line_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    invoice: Mapped[Invoice] = relationship("Invoice", back_populates="lines")

    def __repr__(self) -> str:
        return (
            "InvoiceLine("
            f"id={self.id!r}, invoice_id={self.invoice_id!r}, source_type={self.source_type!r}, "
            f"total={self.line_total!r})"
        )
