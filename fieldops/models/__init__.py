from fieldops.models.directory import Customer, Equipment
from fieldops.models.jobs import (
    ChargeKind,
    Job,
    JobCharge,
    JobEquipment,
    JobHours,
    JobNote,
    JobPart,
    JobPhoto,
    JobStatus,
)
from fieldops.models.archive import (
    CompletedJob,
    CompletedJobCharge,
    CompletedJobEquipment,
    CompletedJobHours,
    CompletedJobNote,
    CompletedJobPart,
    CompletedJobPhoto,
)
from fieldops.models.billing import Invoice, InvoiceLine, InvoiceSourceType, InvoiceStatus, ItemPreset

__all__ = [
    "ChargeKind",
    "CompletedJob",
    "CompletedJobCharge",
    "CompletedJobEquipment",
    "CompletedJobHours",
    "CompletedJobNote",
    "CompletedJobPart",
    "CompletedJobPhoto",
    "Customer",
    "Equipment",
    "Invoice",
    "InvoiceLine",
    "InvoiceSourceType",
    "InvoiceStatus",
    "ItemPreset",
    "Job",
    "JobCharge",
    "JobEquipment",
    "JobHours",
    "JobNote",
    "JobPart",
    "JobPhoto",
    "JobStatus",
]
