from __future__ import annotations

import uuid
from typing import Optional


class CompletionError(RuntimeError):
    pass


class InvalidIdentifier(CompletionError):
    pass


class JobNotFound(CompletionError):
    def __init__(self, job_id: uuid.UUID) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class CompletedJobNotFound(CompletionError):
    def __init__(self, completed_job_id: uuid.UUID) -> None:
        super().__init__(f"Completed job {completed_job_id} not found")
        self.completed_job_id = completed_job_id


class EquipmentNotFound(CompletionError):
    def __init__(self, equipment_id: uuid.UUID) -> None:
        super().__init__(f"Equipment {equipment_id} not found")
        self.equipment_id = equipment_id


class TransactionFailure(CompletionError):
    """The archive transaction rolled back; the live job is untouched and a retry is safe."""


class FollowUpItemFailure(CompletionError):
    """One equipment item could not be rescheduled. Logged and skipped, never raised to callers."""

    def __init__(self, equipment_id: uuid.UUID, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Follow-up scheduling failed for equipment {equipment_id}{detail}")
        self.equipment_id = equipment_id
        self.cause = cause


class BillingError(RuntimeError):
    pass


def parse_identifier(value: object, *, label: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError, TypeError) as exc:
        raise InvalidIdentifier(f"Invalid {label}: {value!r}") from exc
