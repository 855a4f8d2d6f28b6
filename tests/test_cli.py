"""CLI smoke tests via typer's CliRunner."""
from sqlmodel import Session
from typer.testing import CliRunner

from docqa.cli import app
from docqa.domain.statuses import IngestionStatus
from docqa.models.core import IngestionJob

runner = CliRunner()


def _insert_job(engine, status, error_message=None):
    job = IngestionJob(document_id="doc-1", user_id="user-1", status=status, error_message=error_message)
    with Session(engine) as s:
        s.add(job)
        s.commit()
        return job.id


def test_ingest_status_shows_job(use_test_engine):
    job_id = _insert_job(use_test_engine, IngestionStatus.FAILED, "Ingestion timed out after 60000ms")
    result = runner.invoke(app, ["ingest", "status", job_id])
    assert result.exit_code == 0
    assert "FAILED" in result.stdout
    assert "Ingestion timed out after 60000ms" in result.stdout


def test_ingest_status_unknown_job_exits_1(use_test_engine):
    result = runner.invoke(app, ["ingest", "status", "missing"])
    assert result.exit_code == 1


def test_ingest_list_filters_by_status(use_test_engine):
    done = _insert_job(use_test_engine, IngestionStatus.COMPLETED)
    _insert_job(use_test_engine, IngestionStatus.PROCESSING)
    result = runner.invoke(app, ["ingest", "list", "--status", "COMPLETED"])
    assert result.exit_code == 0
    assert "Found 1 jobs" in result.stdout
    assert done in result.stdout


def test_db_init_creates_data_dir(use_test_engine, tmp_path):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "data" / "uploads").is_dir()
