import os
import sys
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")  # keep the module-level engine off disk
os.environ.setdefault("TZ", "UTC")

from fieldops.core.config import settings  # noqa: E402
from fieldops.db.session import Base, configure_sqlite, get_db  # noqa: E402
from fieldops.deps.context import RequestContext  # noqa: E402
from fieldops.models import (  # noqa: E402
    Customer,
    Equipment,
    Job,
    JobCharge,
    JobEquipment,
    JobHours,
    JobNote,
    JobPart,
    JobPhoto,
)

JOB_CREATED_AT = datetime(2025, 1, 1, 12, 0)
CHILD_STAMP_START = datetime(2025, 1, 10, 9, 0)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def org_id():
    return uuid.uuid4()


@pytest.fixture()
def ctx(org_id):
    return RequestContext(org_id=org_id, actor_id="dispatcher-7")


@pytest.fixture()
def make_customer(db_session, org_id):
    def _make(name="Acme Pty Ltd", **kwargs):
        customer = Customer(org_id=kwargs.pop("org_id", org_id), name=name, **kwargs)
        db_session.add(customer)
        db_session.commit()
        return customer

    return _make


@pytest.fixture()
def make_equipment(db_session, org_id):
    def _make(name="Boiler", interval=None, customer=None, **kwargs):
        equipment = Equipment(
            org_id=kwargs.pop("org_id", org_id),
            customer_id=customer.id if customer else None,
            name=name,
            service_interval_months=interval,
            **kwargs,
        )
        db_session.add(equipment)
        db_session.commit()
        return equipment

    return _make


@pytest.fixture()
def make_job(db_session, org_id):
    """Build a live job with ``n`` rows of each child kind and commit it."""

    def _make(
        *,
        title="Quarterly service",
        job_type="Service",
        customer=None,
        equipment=(),
        notes=2,
        charges=2,
        hours=1,
        parts=1,
        photos=1,
        job_org_id=None,
    ):
        owner = job_org_id or org_id
        job = Job(
            org_id=owner,
            customer_id=customer.id if customer else None,
            title=title,
            description="Annual check of plant room",
            job_type=job_type,
            status="in_progress",
            notes="Gate code 1234",
            scheduled_at=datetime(2025, 1, 15, 8, 0),
            created_by="tech-1",
            created_at=JOB_CREATED_AT,
        )
        db_session.add(job)
        db_session.flush()

        stamps = (CHILD_STAMP_START + timedelta(minutes=i) for i in range(1000))
        for i in range(notes):
            db_session.add(JobNote(job_id=job.id, org_id=owner, text=f"Note {i}", created_at=next(stamps)))
        for i in range(charges):
            db_session.add(
                JobCharge(
                    job_id=job.id,
                    org_id=owner,
                    kind="labour",
                    description=f"Charge {i}",
                    quantity=Decimal("1.00"),
                    unit_price=Decimal("50.00"),
                    total=Decimal("50.00"),
                    created_at=next(stamps),
                )
            )
        for i in range(hours):
            db_session.add(
                JobHours(
                    job_id=job.id,
                    org_id=owner,
                    hours=Decimal("1.5"),
                    description=f"Onsite block {i}",
                    created_at=next(stamps),
                )
            )
        for i in range(parts):
            db_session.add(
                JobPart(job_id=job.id, org_id=owner, part_name=f"Part {i}", quantity=i + 1, created_at=next(stamps))
            )
        for i in range(photos):
            db_session.add(
                JobPhoto(
                    job_id=job.id,
                    org_id=owner,
                    url=f"https://files.example.test/{job.id}/photo-{i}.jpg",
                    created_at=next(stamps),
                )
            )
        for item in equipment:
            db_session.add(
                JobEquipment(job_id=job.id, org_id=owner, equipment_id=item.id, created_at=next(stamps))
            )
        db_session.commit()
        return job

    return _make


@pytest.fixture()
def client(db_session, monkeypatch):
    from fastapi.testclient import TestClient

    from fieldops.main import app

    monkeypatch.setattr(settings, "API_TOKEN", None)

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def headers(ctx):
    return {"X-Org-Id": str(ctx.org_id), "X-Actor-Id": ctx.actor_id}
