import uuid
from decimal import Decimal

from sqlalchemy import select

from fieldops.core.config import settings
from fieldops.models import ItemPreset, Job
from fieldops.services import completion


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_complete_job_endpoint(client, headers, db_session, make_job):
    job = make_job(job_type="Repair")

    resp = client.post(f"/api/jobs/{job.id}/complete", headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert uuid.UUID(body["completed_job_id"])
    assert body["completed_at"]
    assert db_session.execute(select(Job).where(Job.id == job.id)).scalars().first() is None

    again = client.post(f"/api/jobs/{job.id}/complete", headers=headers)
    assert again.status_code == 404


def test_complete_job_endpoint_rejects_bad_input(client, headers):
    assert client.post("/api/jobs/not-a-uuid/complete", headers=headers).status_code == 400
    assert client.post(f"/api/jobs/{uuid.uuid4()}/complete", headers=headers).status_code == 404
    assert client.post(f"/api/jobs/{uuid.uuid4()}/complete").status_code == 400
    assert client.post(f"/api/jobs/{uuid.uuid4()}/complete", headers={"X-Org-Id": "acme"}).status_code == 400


def test_complete_job_endpoint_reports_rollback(client, headers, db_session, make_job, monkeypatch):
    job = make_job(job_type="Repair")

    def broken_migrate(db, kind, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(completion, "migrate_children", broken_migrate)

    resp = client.post(f"/api/jobs/{job.id}/complete", headers=headers)

    assert resp.status_code == 500
    assert db_session.execute(select(Job).where(Job.id == job.id)).scalars().first() is not None


def test_completed_job_list_detail_and_delete(client, headers, make_job):
    job = make_job(title="Plant room service", job_type="Repair")
    completed_id = client.post(f"/api/jobs/{job.id}/complete", headers=headers).json()["completed_job_id"]

    listing = client.get("/api/jobs/completed", headers=headers)
    assert listing.status_code == 200
    assert [row["id"] for row in listing.json()] == [completed_id]

    detail = client.get(f"/api/jobs/completed/{completed_id}", headers=headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["title"] == "Plant room service"
    assert body["original_job_id"] == str(job.id)
    assert body["completed_by"] == headers["X-Actor-Id"]
    assert len(body["note_entries"]) == 2
    assert len(body["charges"]) == 2
    assert len(body["photos"]) == 1

    other_org = {"X-Org-Id": str(uuid.uuid4())}
    assert client.get(f"/api/jobs/completed/{completed_id}", headers=other_org).status_code == 404

    deleted = client.delete(f"/api/jobs/completed/{completed_id}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True, "deleted_id": completed_id}
    assert client.get(f"/api/jobs/completed/{completed_id}", headers=headers).status_code == 404


def test_service_history_endpoint(client, headers, make_equipment, make_job):
    boiler = make_equipment("Boiler", interval=6)
    job = make_job(equipment=[boiler], job_type="Service")
    completed_id = client.post(f"/api/jobs/{job.id}/complete", headers=headers).json()["completed_job_id"]

    resp = client.get(f"/api/equipment/{boiler.id}/service-history", headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["equipment"]["name"] == "Boiler"
    assert body["equipment"]["next_service_date"] is not None
    assert [visit["completed_job_id"] for visit in body["visits"]] == [completed_id]
    assert client.get(f"/api/equipment/{uuid.uuid4()}/service-history", headers=headers).status_code == 404


def test_invoice_endpoint_is_idempotent(client, headers, db_session, org_id, make_job):
    db_session.add(ItemPreset(org_id=org_id, name="Charge 0", unit_amount=Decimal("60.00"), tax_rate=Decimal("10")))
    db_session.commit()
    job = make_job(job_type="Repair", hours=0, parts=0)
    completed_id = client.post(f"/api/jobs/{job.id}/complete", headers=headers).json()["completed_job_id"]

    first = client.post(f"/api/jobs/completed/{completed_id}/invoice", headers=headers)
    second = client.post(f"/api/jobs/completed/{completed_id}/invoice", headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["created"] is True
    assert second.json()["created"] is False
    invoice = first.json()["invoice"]
    assert second.json()["invoice"]["id"] == invoice["id"]
    assert invoice["status"] == "draft"
    assert len(invoice["lines"]) == 2
    # Charge 0 at the preset price with tax, Charge 1 at its recorded price.
    assert Decimal(invoice["sub_total"]) == Decimal("110.00")
    assert Decimal(invoice["tax_total"]) == Decimal("6.00")
    assert Decimal(invoice["grand_total"]) == Decimal("116.00")


def test_invoice_endpoint_rejects_empty_job(client, headers, make_job):
    job = make_job(job_type="Repair", charges=0, hours=0, parts=0)
    completed_id = client.post(f"/api/jobs/{job.id}/complete", headers=headers).json()["completed_job_id"]

    resp = client.post(f"/api/jobs/completed/{completed_id}/invoice", headers=headers)

    assert resp.status_code == 400


def test_api_token_is_enforced_when_configured(client, headers, monkeypatch):
    monkeypatch.setattr(settings, "API_TOKEN", "s3cret")

    assert client.get("/api/jobs/completed", headers=headers).status_code == 401
    bad = {**headers, "X-API-Key": "wrong"}
    assert client.get("/api/jobs/completed", headers=bad).status_code == 401
    good = {**headers, "Authorization": "Bearer s3cret"}
    assert client.get("/api/jobs/completed", headers=good).status_code == 200
