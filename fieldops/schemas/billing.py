from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, condecimal

from fieldops.models.billing import InvoiceSourceType, InvoiceStatus


class InvoiceLineOut(BaseModel):
    id: uuid.UUID
    position: int
    source_type: InvoiceSourceType
    source_id: Optional[uuid.UUID]
    description: str
    quantity: condecimal(max_digits=12, decimal_places=2)
    unit_amount: condecimal(max_digits=12, decimal_places=2)
    tax_rate: condecimal(max_digits=5, decimal_places=2)
    line_total: condecimal(max_digits=12, decimal_places=2)

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: uuid.UUID
    customer_id: Optional[uuid.UUID]
    completed_job_id: Optional[uuid.UUID]
    original_job_id: Optional[uuid.UUID]
    title: str
    status: InvoiceStatus
    currency: str
    sub_total: condecimal(max_digits=12, decimal_places=2)
    tax_total: condecimal(max_digits=12, decimal_places=2)
    grand_total: condecimal(max_digits=12, decimal_places=2)
    created_by: Optional[str]
    created_at: datetime
    lines: List[InvoiceLineOut]

    class Config:
        from_attributes = True


class InvoiceConversionResponse(BaseModel):
    ok: bool = True
    created: bool
    invoice: InvoiceOut
