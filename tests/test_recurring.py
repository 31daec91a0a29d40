import logging
from datetime import date, datetime

import pytest
from sqlalchemy import func, select

from fieldops.models import CompletedJob, Equipment, Job, JobEquipment
from fieldops.services import completion, recurring
from fieldops.services.completion import complete_job
from fieldops.services.recurring import add_months

COMPLETED_AT = datetime(2025, 1, 15, 10, 0)


def _jobs_titled(db, title):
    return db.execute(select(Job).where(Job.title == title)).scalars().all()


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (date(2025, 1, 15), 6, date(2025, 7, 15)),
        (date(2025, 1, 31), 1, date(2025, 2, 28)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2025, 8, 31), 1, date(2025, 9, 30)),
        (date(2025, 11, 30), 3, date(2026, 2, 28)),
        (date(2025, 3, 10), 24, date(2027, 3, 10)),
    ],
)
def test_add_months_uses_calendar_months(start, months, expected):
    assert add_months(start, months) == expected


def test_add_months_keeps_time_of_day():
    assert add_months(datetime(2025, 5, 31, 14, 45), 1) == datetime(2025, 6, 30, 14, 45)


def test_maintenance_job_books_one_follow_up_per_equipment(db_session, ctx, make_customer, make_equipment, make_job):
    customer = make_customer("Harbour Hotel")
    boiler = make_equipment("Boiler", interval=6, customer=customer)
    job = make_job(title="Plant room service", customer=customer, equipment=[boiler], job_type="Service")

    result = complete_job(db_session, ctx, job.id, completed_at=COMPLETED_AT)

    assert len(result.follow_up_job_ids) == 1
    db_session.expire_all()
    follow_up = db_session.get(Job, result.follow_up_job_ids[0])
    assert follow_up.org_id == ctx.org_id
    assert follow_up.customer_id == customer.id
    assert follow_up.title == "Service - Boiler"
    assert follow_up.job_type == "Service"
    assert follow_up.status == "new"
    assert follow_up.scheduled_at == datetime(2025, 7, 15, 10, 0)
    assert follow_up.created_by == "dispatcher-7"
    assert "Plant room service" in follow_up.description
    assert str(job.id) in follow_up.description

    links = db_session.execute(select(JobEquipment).where(JobEquipment.job_id == follow_up.id)).scalars().all()
    assert [link.equipment_id for link in links] == [boiler.id]

    boiler = db_session.get(Equipment, boiler.id)
    assert boiler.last_service_date == date(2025, 1, 15)
    assert boiler.next_service_date == date(2025, 7, 15)


def test_job_type_match_ignores_case_and_whitespace(db_session, ctx, make_equipment, make_job):
    boiler = make_equipment("Boiler", interval=12)
    job = make_job(equipment=[boiler], job_type="  service ")

    result = complete_job(db_session, ctx, job.id, completed_at=COMPLETED_AT)

    assert len(result.follow_up_job_ids) == 1
    assert db_session.get(Job, result.follow_up_job_ids[0]).scheduled_at == datetime(2026, 1, 15, 10, 0)


def test_equipment_without_interval_gets_no_follow_up(db_session, ctx, make_equipment, make_job):
    boiler = make_equipment("Boiler", interval=None)
    job = make_job(equipment=[boiler], job_type="Service")

    result = complete_job(db_session, ctx, job.id, completed_at=COMPLETED_AT)

    assert result.follow_up_job_ids == []
    assert db_session.execute(select(func.count()).select_from(Job)).scalar_one() == 0
    db_session.expire_all()
    boiler = db_session.get(Equipment, boiler.id)
    assert boiler.last_service_date is None
    assert boiler.next_service_date is None


def test_non_maintenance_job_schedules_nothing(db_session, ctx, make_equipment, make_job):
    boiler = make_equipment("Boiler", interval=6)
    job = make_job(equipment=[boiler], job_type="Repair")

    result = complete_job(db_session, ctx, job.id, completed_at=COMPLETED_AT)

    assert result.follow_up_job_ids == []
    assert _jobs_titled(db_session, "Service - Boiler") == []
    db_session.expire_all()
    assert db_session.get(Equipment, boiler.id).next_service_date is None


def test_one_failing_item_does_not_block_the_rest(db_session, ctx, make_equipment, make_job, monkeypatch, caplog):
    boiler = make_equipment("Boiler", interval=3)
    chiller = make_equipment("Chiller", interval=12)
    job = make_job(equipment=[boiler, chiller], job_type="Service")
    job_id = job.id
    real_schedule = recurring._schedule_follow_up

    def flaky_schedule(db, job, equipment, **kwargs):
        follow_up = real_schedule(db, job, equipment, **kwargs)
        if equipment.name == "Chiller":
            # Fails after its rows were flushed, so the savepoint has real work to undo.
            raise RuntimeError("calendar sync failed")
        return follow_up

    monkeypatch.setattr(recurring, "_schedule_follow_up", flaky_schedule)

    with caplog.at_level(logging.WARNING, logger="fieldops.services.recurring"):
        result = complete_job(db_session, ctx, job_id, completed_at=COMPLETED_AT)

    assert len(result.follow_up_job_ids) == 1
    assert any("follow-up skipped" in record.getMessage() for record in caplog.records)

    db_session.expire_all()
    assert db_session.get(CompletedJob, result.completed_job_id) is not None
    assert db_session.execute(select(Job).where(Job.id == job_id)).scalars().first() is None

    assert len(_jobs_titled(db_session, "Service - Boiler")) == 1
    assert _jobs_titled(db_session, "Service - Chiller") == []

    boiler = db_session.get(Equipment, boiler.id)
    chiller = db_session.get(Equipment, chiller.id)
    assert boiler.next_service_date == date(2025, 4, 15)
    assert chiller.last_service_date is None
    assert chiller.next_service_date is None


def test_follow_up_outcome_reports_skips_and_failures(db_session, ctx, make_equipment, make_job, monkeypatch):
    no_interval = make_equipment("Air handler", interval=None)
    broken = make_equipment("Chiller", interval=12)
    job = make_job(equipment=[no_interval, broken], job_type="Service")

    def always_fails(db, job, equipment, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(recurring, "_schedule_follow_up", always_fails)

    outcome = recurring.schedule_follow_ups(
        db_session,
        job,
        recurring.linked_equipment(db_session, job),
        completed_at=COMPLETED_AT,
    )

    assert outcome.scheduled_job_ids == []
    assert outcome.skipped_equipment_ids == [no_interval.id]
    assert [failure.equipment_id for failure in outcome.failures] == [broken.id]
    assert isinstance(outcome.failures[0].cause, RuntimeError)
    db_session.rollback()


def test_non_maintenance_job_never_looks_up_equipment(db_session, ctx, make_equipment, make_job, monkeypatch):
    boiler = make_equipment("Boiler", interval=6)
    job = make_job(equipment=[boiler], job_type="Repair")
    calls = []

    def tracking_linked_equipment(db, job):
        calls.append(job.id)
        return []

    monkeypatch.setattr(completion, "linked_equipment", tracking_linked_equipment)

    result = complete_job(db_session, ctx, job.id, completed_at=COMPLETED_AT)

    assert calls == []
    assert result.follow_up_job_ids == []
