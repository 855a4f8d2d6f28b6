"""Repository for IngestionJob records. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session, col, desc, select
from docqa.domain.statuses import ACTIVE_INGESTION_STATUSES, IngestionStatus
from docqa.models.core import IngestionJob, utcnow


class IngestionJobRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_active(self, job_id: str) -> IngestionJob | None:
        """Fetch a job unless it is soft-deleted."""
        return self._s.exec(
            select(IngestionJob).where(IngestionJob.id == job_id, IngestionJob.is_deleted == False)  # noqa: E712
        ).first()

    def _filtered(self, stmt, owner_id: str | None, status: IngestionStatus | None):
        stmt = stmt.where(IngestionJob.is_deleted == False)  # noqa: E712
        if owner_id is not None:
            stmt = stmt.where(IngestionJob.user_id == owner_id)
        if status is not None:
            stmt = stmt.where(IngestionJob.status == status)
        return stmt

    def list_jobs(
        self,
        *,
        owner_id: str | None = None,
        status: IngestionStatus | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[IngestionJob]:
        stmt = self._filtered(select(IngestionJob), owner_id, status)
        stmt = stmt.order_by(desc(IngestionJob.created_at)).offset(offset).limit(limit)
        return list(self._s.exec(stmt).all())

    def count_jobs(
        self, *, owner_id: str | None = None, status: IngestionStatus | None = None,
    ) -> int:
        stmt = self._filtered(select(func.count()).select_from(IngestionJob), owner_id, status)
        return self._s.exec(stmt).one()

    def has_active_job(self, document_id: str) -> bool:
        return self._s.exec(
            select(IngestionJob.id).where(
                IngestionJob.document_id == document_id,
                IngestionJob.is_deleted == False,  # noqa: E712
                col(IngestionJob.status).in_(list(ACTIVE_INGESTION_STATUSES)),
            )
        ).first() is not None

    def create(self, *, document_id: str, user_id: str) -> IngestionJob:
        now = utcnow()
        job = IngestionJob(
            document_id=document_id,
            user_id=user_id,
            status=IngestionStatus.PENDING,
            started_at=now,
            created_at=now,
            updated_at=now,
        )
        self._s.add(job)
        self._s.flush()  # get generated PK without committing
        return job

    def apply_status(
        self, job: IngestionJob, status: IngestionStatus, error_message: str | None = None,
    ) -> None:
        now = utcnow()
        job.status = status
        job.updated_at = now
        if status.is_terminal:
            job.completed_at = now
        if error_message:
            job.error_message = error_message
        self._s.add(job)
