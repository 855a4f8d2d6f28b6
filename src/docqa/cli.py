import os
import sys
from typing import Optional
import typer
from docqa.config import settings
from docqa.domain.statuses import IngestionStatus
from docqa.logging import logger, get_run_id, setup_logging

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    DocQA document ingestion and Q&A CLI.
    """
    setup_logging(settings.LOG_LEVEL)

@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 DocQA Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Ingestion configuration ────────────────────────────────────
    print("\n[Ingestion]")
    print(f"  INGESTION_TIMEOUT_MS:        {settings.INGESTION_TIMEOUT_MS}")
    print(f"  MOCK_INGEST_SUCCESS_RATE:    {settings.MOCK_INGEST_SUCCESS_RATE}")
    print(f"  CHUNK_SIZE:                  {settings.CHUNK_SIZE}")
    print(f"  Upload trigger backend:      {'mock' if settings.automatic_ingest_uses_mock else 'external'}")
    print(f"  Manual trigger backend:      {'mock' if settings.manual_ingest_uses_mock else 'external'}")
    needs_service = not (settings.automatic_ingest_uses_mock and settings.manual_ingest_uses_mock)
    if settings.INGEST_SERVICE_URL:
        print(f"  INGEST_SERVICE_URL:          ✅ {settings.INGEST_SERVICE_URL}")
        passed += 1
    elif needs_service:
        print("  INGEST_SERVICE_URL:          ⚠️  Not set; external triggers fall back to mock")
        passed += 1
    else:
        print("  INGEST_SERVICE_URL:          ✅ Not needed (mock only)")
        passed += 1

    # ── Check 3: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.exists() and data_dir.is_dir():
        print(f"  {data_dir}/                        ✅ Found: {data_dir.absolute()}")
        passed += 1
    else:
        print(f"  {data_dir}/                        ❌ Missing: {data_dir.absolute()}")
        failures.append(f"{data_dir}/ directory not found at {data_dir.absolute()} — run `docqa db init`")

    # ── Check 4: Database reachability ───────────────────────────────────────
    print("\n[Database]")
    db_file = data_dir / "docqa.db"
    if settings.DATABASE_URL:
        print(f"  DATABASE_URL:                ✅ {settings.DATABASE_URL}")
        passed += 1
    elif db_file.exists():
        if os.access(db_file, os.W_OK):
            print(f"  {db_file}           ✅ Exists and writable")
            passed += 1
        else:
            print(f"  {db_file}           ❌ Exists but NOT writable")
            failures.append(f"{db_file} exists but is not writable — check file permissions")
    elif data_dir.exists():
        if os.access(data_dir, os.W_OK):
            print(f"  {db_file}           ✅ Does not exist yet; {data_dir}/ is writable (db init can create it)")
            passed += 1
        else:
            print(f"  {db_file}           ❌ {data_dir}/ directory is not writable")
            failures.append(f"{data_dir}/ directory is not writable — db init cannot create docqa.db")
    else:
        print(f"  {db_file}           ⚠️  Skipped ({data_dir}/ missing)")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed — all good ✅")
        print()


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Initialize the data directory and database tables."""
    from docqa.infra.db.engine import engine
    from docqa.db import init_db
    try:
        init_db(engine)
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


ingest_app = typer.Typer(help="Inspect ingestion jobs.")
app.add_typer(ingest_app, name="ingest")

@ingest_app.command("status")
def status(job_id: str):
    """Show one ingestion job."""
    from docqa.infra.db.repositories.ingestion_job_repository import IngestionJobRepository
    from docqa.infra.db.uow import UnitOfWork
    with UnitOfWork() as uow:
        job = IngestionJobRepository(uow.session).get_active(job_id)
        if job is None:
            print(f"❌ Ingestion job {job_id} not found.")
            raise typer.Exit(code=1)
        print(f"Job:       {job.id}")
        print(f"Document:  {job.document_id}")
        print(f"User:      {job.user_id}")
        print(f"Status:    {job.status.value}")
        print(f"Started:   {job.started_at}")
        print(f"Completed: {job.completed_at or '-'}")
        if job.error_message:
            print(f"Error:     {job.error_message}")

@ingest_app.command("list")
def list_jobs(
    status: Optional[IngestionStatus] = typer.Option(None, help="Only jobs in this status."),
    limit: int = typer.Option(20, min=1, max=100),
):
    """List the most recent ingestion jobs."""
    from docqa.infra.db.repositories.ingestion_job_repository import IngestionJobRepository
    from docqa.infra.db.uow import UnitOfWork
    with UnitOfWork() as uow:
        jobs = IngestionJobRepository(uow.session).list_jobs(status=status, limit=limit)
        if not jobs:
            print("No ingestion jobs found.")
            return
        print(f"Found {len(jobs)} jobs:")
        for i, job in enumerate(jobs, 1):
            suffix = f" ({job.error_message})" if job.error_message else ""
            print(f"{i}. [{job.status.value}] {job.id} document={job.document_id}{suffix}")


if __name__ == "__main__":
    app()
