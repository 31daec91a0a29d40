from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.db.session import unit_of_work
from fieldops.deps.context import RequestContext
from fieldops.models.archive import CompletedJob
from fieldops.models.billing import Invoice, InvoiceLine, InvoiceSourceType, InvoiceStatus, ItemPreset
from fieldops.services.costing import PricedLine, _as_decimal, compute_line_total, sum_lines
from fieldops.services.errors import BillingError, CompletedJobNotFound, parse_identifier

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionResult:
    invoice: Invoice
    created: bool


@dataclass(slots=True)
class _DraftLine:
    source_type: InvoiceSourceType
    source_id: uuid.UUID
    description: str
    quantity: Decimal
    unit_amount: Decimal
    tax_rate: Decimal

    def priced(self) -> PricedLine:
        return PricedLine(quantity=self.quantity, unit_amount=self.unit_amount, tax_rate=self.tax_rate)


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().casefold()


def load_presets(db: Session, org_id: uuid.UUID) -> Dict[str, ItemPreset]:
    rows = db.execute(select(ItemPreset).where(ItemPreset.org_id == org_id)).scalars().all()
    return {_normalize(row.name): row for row in rows if _normalize(row.name)}


def find_invoice_for_job(db: Session, org_id: uuid.UUID, original_job_id: uuid.UUID) -> Optional[Invoice]:
    return (
        db.execute(
            select(Invoice).where(Invoice.org_id == org_id, Invoice.original_job_id == original_job_id)
        )
        .scalars()
        .first()
    )


def _load_completed_job(db: Session, completed_job_id: uuid.UUID, org_id: uuid.UUID) -> CompletedJob:
    archive = (
        db.execute(
            select(CompletedJob).where(CompletedJob.id == completed_job_id, CompletedJob.org_id == org_id)
        )
        .scalars()
        .first()
    )
    if not archive:
        raise CompletedJobNotFound(completed_job_id)
    return archive


def _draft_lines(archive: CompletedJob, presets: Dict[str, ItemPreset]) -> List[_DraftLine]:
    """Rebuild billable lines from the archive, priced from today's presets."""
    labour_preset = presets.get(_normalize(settings.LABOUR_PRESET_NAME))
    lines: List[_DraftLine] = []

    for charge in archive.charges:
        preset = presets.get(_normalize(charge.description))
        unit_amount = preset.unit_amount if preset else charge.unit_price
        lines.append(
            _DraftLine(
                source_type=InvoiceSourceType.CHARGE,
                source_id=charge.id,
                description=charge.description,
                quantity=_as_decimal(charge.quantity),
                unit_amount=_as_decimal(unit_amount),
                tax_rate=_as_decimal(preset.tax_rate if preset else 0),
            )
        )

    for entry in archive.hour_entries:
        preset = presets.get(_normalize(entry.description)) or labour_preset
        lines.append(
            _DraftLine(
                source_type=InvoiceSourceType.HOURS,
                source_id=entry.id,
                description=(entry.description or "").strip() or settings.LABOUR_PRESET_NAME,
                quantity=_as_decimal(entry.hours),
                unit_amount=_as_decimal(preset.unit_amount if preset else 0),
                tax_rate=_as_decimal(preset.tax_rate if preset else 0),
            )
        )

    for part in archive.parts:
        preset = presets.get(_normalize(part.part_name))
        lines.append(
            _DraftLine(
                source_type=InvoiceSourceType.PART,
                source_id=part.id,
                description=part.part_name,
                quantity=_as_decimal(part.quantity),
                unit_amount=_as_decimal(preset.unit_amount if preset else 0),
                tax_rate=_as_decimal(preset.tax_rate if preset else 0),
            )
        )
    return lines


def convert_to_invoice(db: Session, ctx: RequestContext, completed_job_id: object) -> ConversionResult:
    archive_id = parse_identifier(completed_job_id, label="completed job id")
    archive = _load_completed_job(db, archive_id, ctx.org_id)

    existing = find_invoice_for_job(db, ctx.org_id, archive.original_job_id)
    if existing:
        log.info("completed job %s already invoiced as %s", archive.id, existing.id)
        return ConversionResult(invoice=existing, created=False)

    drafts = _draft_lines(archive, load_presets(db, ctx.org_id))
    if not drafts:
        raise BillingError("Completed job has no charges, hours or parts to invoice.")
    totals = sum_lines(draft.priced() for draft in drafts)

    invoice = Invoice(
        org_id=ctx.org_id,
        customer_id=archive.customer_id,
        completed_job_id=archive.id,
        original_job_id=archive.original_job_id,
        title=f"Invoice - {archive.title}",
        status=InvoiceStatus.DRAFT,
        currency=settings.DEFAULT_CURRENCY,
        sub_total=totals.sub_total,
        tax_total=totals.tax_total,
        grand_total=totals.grand_total,
        created_by=ctx.actor_id,
    )
    try:
        with unit_of_work(db):
            db.add(invoice)
            db.flush()
            for position, draft in enumerate(drafts):
                db.add(
                    InvoiceLine(
                        org_id=ctx.org_id,
                        invoice_id=invoice.id,
                        position=position,
                        source_type=draft.source_type,
                        source_id=draft.source_id,
                        description=draft.description,
                        quantity=draft.quantity,
                        unit_amount=draft.unit_amount,
                        tax_rate=draft.tax_rate,
                        line_total=compute_line_total(draft.quantity, draft.unit_amount),
                    )
                )
    except IntegrityError:
        # A concurrent conversion won the unique (org_id, original_job_id) race.
        existing = find_invoice_for_job(db, ctx.org_id, archive.original_job_id)
        if existing:
            return ConversionResult(invoice=existing, created=False)
        raise

    db.refresh(invoice)
    log.info(
        "completed job %s converted to invoice %s (lines=%d, total=%s)",
        archive.id,
        invoice.id,
        len(drafts),
        invoice.grand_total,
    )
    return ConversionResult(invoice=invoice, created=True)
