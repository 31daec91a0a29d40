from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, condecimal


class CompleteJobResponse(BaseModel):
    ok: bool = True
    completed_job_id: uuid.UUID
    completed_at: datetime


class CompletedNoteOut(BaseModel):
    id: uuid.UUID
    text: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedChargeOut(BaseModel):
    id: uuid.UUID
    kind: str
    description: str
    quantity: condecimal(max_digits=10, decimal_places=2)
    unit_price: condecimal(max_digits=10, decimal_places=2)
    total: condecimal(max_digits=10, decimal_places=2)
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedHoursOut(BaseModel):
    id: uuid.UUID
    hours: condecimal(max_digits=4, decimal_places=1)
    description: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedPartOut(BaseModel):
    id: uuid.UUID
    part_name: str
    quantity: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedPhotoOut(BaseModel):
    id: uuid.UUID
    url: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedEquipmentOut(BaseModel):
    id: uuid.UUID
    equipment_id: uuid.UUID
    equipment_name: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CompletedJobSummary(BaseModel):
    id: uuid.UUID
    original_job_id: uuid.UUID
    customer_id: Optional[uuid.UUID]
    customer_name: Optional[str]
    title: str
    job_type: Optional[str]
    scheduled_at: Optional[datetime]
    completed_at: datetime
    completed_by: Optional[str]

    class Config:
        from_attributes = True


class CompletedJobOut(CompletedJobSummary):
    description: Optional[str]
    notes: Optional[str]
    original_created_by: Optional[str]
    original_created_at: Optional[datetime]
    note_entries: List[CompletedNoteOut] = []
    charges: List[CompletedChargeOut] = []
    hour_entries: List[CompletedHoursOut] = []
    parts: List[CompletedPartOut] = []
    photos: List[CompletedPhotoOut] = []
    equipment_links: List[CompletedEquipmentOut] = []


class EquipmentOut(BaseModel):
    id: uuid.UUID
    customer_id: Optional[uuid.UUID]
    name: str
    make: Optional[str]
    model: Optional[str]
    serial: Optional[str]
    service_interval_months: Optional[int]
    last_service_date: Optional[date]
    next_service_date: Optional[date]

    class Config:
        from_attributes = True


class ServiceVisitOut(BaseModel):
    completed_job_id: uuid.UUID
    title: str
    job_type: Optional[str]
    completed_at: datetime
    equipment_name: Optional[str]

    class Config:
        from_attributes = True


class ServiceHistoryOut(BaseModel):
    equipment: EquipmentOut
    visits: List[ServiceVisitOut]

    class Config:
        from_attributes = True
