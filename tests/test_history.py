import uuid
from datetime import datetime

import pytest
from sqlalchemy import func, select

from fieldops.deps.context import RequestContext
from fieldops.models import CompletedJob, CompletedJobCharge, CompletedJobNote
from fieldops.services.completion import complete_job
from fieldops.services.errors import CompletedJobNotFound, EquipmentNotFound
from fieldops.services.history import (
    delete_completed_job,
    equipment_service_history,
    get_completed_job,
    list_completed_jobs,
)


def test_list_is_newest_first_and_scoped_to_org(db_session, ctx, make_customer, make_job):
    acme = make_customer("Acme Pty Ltd")
    other_customer = make_customer("Harbour Hotel")
    older = complete_job(db_session, ctx, make_job(title="January visit", customer=acme).id, completed_at=datetime(2025, 1, 5))
    newer = complete_job(db_session, ctx, make_job(title="March visit", customer=other_customer).id, completed_at=datetime(2025, 3, 5))

    rows = list_completed_jobs(db_session, ctx)
    assert [row.id for row in rows] == [newer.completed_job_id, older.completed_job_id]

    only_acme = list_completed_jobs(db_session, ctx, customer_id=acme.id)
    assert [row.title for row in only_acme] == ["January visit"]

    assert list_completed_jobs(db_session, RequestContext(org_id=uuid.uuid4())) == []
    assert len(list_completed_jobs(db_session, ctx, limit=1)) == 1


def test_get_completed_job_loads_children(db_session, ctx, make_job):
    archived = complete_job(db_session, ctx, make_job(job_type="Repair").id)

    archive = get_completed_job(db_session, ctx, str(archived.completed_job_id))

    assert len(archive.note_entries) == 2
    assert len(archive.charges) == 2
    assert len(archive.hour_entries) == 1
    assert len(archive.parts) == 1
    assert len(archive.photos) == 1
    assert archive.equipment_links == []

    with pytest.raises(CompletedJobNotFound):
        get_completed_job(db_session, RequestContext(org_id=uuid.uuid4()), archived.completed_job_id)


def test_delete_completed_job_removes_archive_and_children(db_session, ctx, make_job):
    archived = complete_job(db_session, ctx, make_job(job_type="Repair").id)

    deleted_id = delete_completed_job(db_session, ctx, archived.completed_job_id)

    assert deleted_id == archived.completed_job_id
    assert db_session.execute(select(func.count()).select_from(CompletedJob)).scalar_one() == 0
    assert db_session.execute(select(func.count()).select_from(CompletedJobNote)).scalar_one() == 0
    assert db_session.execute(select(func.count()).select_from(CompletedJobCharge)).scalar_one() == 0

    with pytest.raises(CompletedJobNotFound):
        delete_completed_job(db_session, ctx, archived.completed_job_id)


def test_equipment_service_history_lists_visits_newest_first(db_session, ctx, make_equipment, make_job):
    boiler = make_equipment("Boiler")
    chiller = make_equipment("Chiller")
    first = complete_job(
        db_session, ctx, make_job(title="Boiler install", equipment=[boiler], job_type="Repair").id,
        completed_at=datetime(2025, 2, 1),
    )
    second = complete_job(
        db_session, ctx, make_job(title="Plant check", equipment=[boiler, chiller], job_type="Repair").id,
        completed_at=datetime(2025, 6, 1),
    )

    history = equipment_service_history(db_session, ctx, boiler.id)

    assert history.equipment.id == boiler.id
    assert [visit.completed_job_id for visit in history.visits] == [second.completed_job_id, first.completed_job_id]
    assert [visit.title for visit in history.visits] == ["Plant check", "Boiler install"]
    assert {visit.equipment_name for visit in history.visits} == {"Boiler"}

    assert [visit.title for visit in equipment_service_history(db_session, ctx, chiller.id).visits] == ["Plant check"]


def test_equipment_from_another_org_is_not_found(db_session, ctx, make_equipment):
    foreign = make_equipment("Boiler", org_id=uuid.uuid4())

    with pytest.raises(EquipmentNotFound):
        equipment_service_history(db_session, ctx, foreign.id)


def test_equipment_linked_twice_counts_as_one_visit(db_session, ctx, make_equipment, make_job):
    boiler = make_equipment("Boiler")
    archived = complete_job(
        db_session, ctx, make_job(title="Double booked", equipment=[boiler, boiler], job_type="Repair").id,
        completed_at=datetime(2025, 4, 1),
    )
    assert archived.migrated["equipment"] == 2

    history = equipment_service_history(db_session, ctx, boiler.id)

    assert [visit.completed_job_id for visit in history.visits] == [archived.completed_job_id]
    assert history.visits[0].equipment_name == "Boiler"
