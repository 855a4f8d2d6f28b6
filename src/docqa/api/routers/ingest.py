"""Ingestion router: manual trigger plus job polling."""
from fastapi import APIRouter, Depends, Query
from docqa.api.deps import get_ingestion, get_requester, require_editor
from docqa.api.schemas.ingest import (
    IngestionJobList,
    IngestionJobRead,
    IngestionJobsQuery,
    TriggerIngestionRequest,
)
from docqa.domain.access import Requester
from docqa.domain.statuses import IngestionStatus
from docqa.logging import logger
from docqa.services.ingestion_service import IngestionOrchestrator

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("/trigger", response_model=IngestionJobRead, status_code=201)
async def trigger_ingestion(
    payload: TriggerIngestionRequest,
    requester: Requester = Depends(require_editor),
    ingestion: IngestionOrchestrator = Depends(get_ingestion),
) -> IngestionJobRead:
    """Start ingestion and return the job at once; poll GET /ingest/{job_id} for the outcome."""
    job = ingestion.trigger_ingestion(payload.document_id, requester)
    logger.info("Manual ingestion job %s started by user %s", job.id, requester.id)
    return job


@router.get("/{job_id}", response_model=IngestionJobRead)
def get_ingestion_job(
    job_id: str,
    requester: Requester = Depends(get_requester),
    ingestion: IngestionOrchestrator = Depends(get_ingestion),
) -> IngestionJobRead:
    return ingestion.get_ingestion_job(job_id, requester)


@router.get("", response_model=IngestionJobList)
def list_ingestion_jobs(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: IngestionStatus | None = None,
    requester: Requester = Depends(get_requester),
    ingestion: IngestionOrchestrator = Depends(get_ingestion),
) -> IngestionJobList:
    query = IngestionJobsQuery(page=page, limit=limit, status=status)
    return ingestion.get_ingestion_jobs(query, requester)
