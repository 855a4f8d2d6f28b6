"""Integration tests for the /ingest endpoints.

Uses an app wired with a hand-operated processor so each test decides when
jobs finish.
"""
import uuid

import pytest

from docqa.domain.statuses import IngestionStatus
from docqa.ingest.processors import IngestBackend
from docqa.services.document_status import DocumentStatusProjection
from docqa.services.ingestion_service import IngestionOrchestrator


class _ManualProcessor:
    def __init__(self) -> None:
        self.dispatched = []

    def process_with_timeout(self, job_id, document_id, timeout_ms, on_complete):
        self.dispatched.append((job_id, on_complete))

    def finish(self, job_id, status=IngestionStatus.COMPLETED, error_message=None):
        for dispatched_id, on_complete in self.dispatched:
            if dispatched_id == job_id:
                on_complete(status, error_message)


@pytest.fixture
def processor():
    return _ManualProcessor()


@pytest.fixture
def manual_client(use_test_engine, processor):
    from fastapi.testclient import TestClient
    from docqa.api.app import create_app

    orchestrator = IngestionOrchestrator(
        documents=DocumentStatusProjection(),
        processors={IngestBackend.MOCK: processor, IngestBackend.EXTERNAL: processor},
        timeout_ms=1000,
    )
    with TestClient(create_app(ingestion=orchestrator)) as c:
        yield c


def _register(client, role):
    resp = client.post("/users/register", json={
        "name": f"{role.title()} User", "email": f"{uuid.uuid4().hex[:8]}@example.com", "role": role,
    })
    return resp.json()["id"]


def _auth(user_id):
    return {"X-User-Id": user_id}


def _upload(client, user_id):
    resp = client.post(
        "/documents",
        files={"file": ("report.pdf", b"%PDF-1.4 report", "application/pdf")},
        headers=_auth(user_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def _latest_job(client, user_id):
    return client.get("/ingest", headers=_auth(user_id)).json()["jobs"][0]


def test_upload_creates_processing_job(manual_client, processor):
    editor = _register(manual_client, "EDITOR")
    doc_id = _upload(manual_client, editor)

    job = _latest_job(manual_client, editor)
    assert job["document_id"] == doc_id
    assert job["status"] == "PROCESSING"
    assert job["completed_at"] is None
    assert len(processor.dispatched) == 1


def test_trigger_conflicts_while_job_active(manual_client, processor):
    editor = _register(manual_client, "EDITOR")
    doc_id = _upload(manual_client, editor)

    resp = manual_client.post("/ingest/trigger", json={"document_id": doc_id}, headers=_auth(editor))
    assert resp.status_code == 409

    processor.finish(_latest_job(manual_client, editor)["id"])
    resp = manual_client.post("/ingest/trigger", json={"document_id": doc_id}, headers=_auth(editor))
    assert resp.status_code == 201
    assert resp.json()["status"] == "PROCESSING"
    assert manual_client.get(f"/documents/{doc_id}", headers=_auth(editor)).json()["status"] == "PROCESSING"


def test_trigger_validation_and_roles(manual_client):
    editor = _register(manual_client, "EDITOR")
    viewer = _register(manual_client, "VIEWER")

    assert manual_client.post("/ingest/trigger", json={"document_id": "x"}).status_code == 401
    assert manual_client.post(
        "/ingest/trigger", json={"document_id": "x"}, headers=_auth(viewer),
    ).status_code == 403
    assert manual_client.post(
        "/ingest/trigger", json={"document_id": "  "}, headers=_auth(editor),
    ).status_code == 422
    assert manual_client.post(
        "/ingest/trigger", json={"document_id": "missing"}, headers=_auth(editor),
    ).status_code == 404


def test_failed_job_is_reported_with_error(manual_client, processor):
    editor = _register(manual_client, "EDITOR")
    doc_id = _upload(manual_client, editor)
    job_id = _latest_job(manual_client, editor)["id"]

    processor.finish(job_id, IngestionStatus.FAILED, "Ingestion timed out after 1000ms")

    job = manual_client.get(f"/ingest/{job_id}", headers=_auth(editor)).json()
    assert job["status"] == "FAILED"
    assert job["error_message"] == "Ingestion timed out after 1000ms"
    assert job["completed_at"] is not None
    assert manual_client.get(f"/documents/{doc_id}", headers=_auth(editor)).json()["status"] == "FAILED"


def test_job_access_and_listing_filters(manual_client, processor):
    editor = _register(manual_client, "EDITOR")
    viewer = _register(manual_client, "VIEWER")
    first = _upload(manual_client, editor)
    _upload(manual_client, editor)
    jobs = manual_client.get("/ingest", headers=_auth(editor)).json()
    first_job = next(j for j in jobs["jobs"] if j["document_id"] == first)
    processor.finish(first_job["id"])

    assert manual_client.get(f"/ingest/{first_job['id']}", headers=_auth(viewer)).status_code == 403
    assert manual_client.get("/ingest/missing", headers=_auth(editor)).status_code == 404
    assert manual_client.get("/ingest", headers=_auth(viewer)).json()["pagination"]["total"] == 0

    completed = manual_client.get("/ingest?status=COMPLETED", headers=_auth(editor)).json()
    assert [j["id"] for j in completed["jobs"]] == [first_job["id"]]

    page = manual_client.get("/ingest?page=1&limit=1", headers=_auth(editor)).json()
    assert len(page["jobs"]) == 1
    assert page["pagination"]["pages"] == 2

    assert manual_client.get("/ingest?limit=0", headers=_auth(editor)).status_code == 422
    assert manual_client.get("/ingest?status=BOGUS", headers=_auth(editor)).status_code == 422
