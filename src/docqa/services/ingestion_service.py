"""Ingestion orchestrator: the job state machine from trigger to terminal state.

PENDING -> PROCESSING -> COMPLETED | FAILED. Terminal states are absorbing.

Triggers run synchronously up to processor dispatch and return the job right
away; the processor later calls back (once) on the event loop and
``handle_ingestion_complete`` applies the outcome to the job, the document
status and, on success, the document's chunks in a single unit of work.
None of this uses the triggering request's session because callbacks
outlive the request.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from docqa.api.schemas.ingest import (
    IngestionJobList,
    IngestionJobRead,
    IngestionJobsQuery,
    Pagination,
)
from docqa.domain.access import Requester, ensure_access
from docqa.domain.exceptions import (
    BadInputError,
    CompletionHandlerFailure,
    ConflictError,
    NotFoundError,
)
from docqa.domain.statuses import DocumentStatus, IngestionStatus
from docqa.infra.db.repositories.chunk_repository import ChunkRepository
from docqa.infra.db.repositories.document_repository import DocumentRepository
from docqa.infra.db.repositories.ingestion_job_repository import IngestionJobRepository
from docqa.infra.db.uow import UnitOfWork, joined
from docqa.ingest.chunking import (
    chunk_metadata,
    generate_mock_document_content,
    split_text_into_chunks,
)
from docqa.ingest.processors import IngestBackend, Processor
from docqa.services.document_status import DocumentStatusWriter

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60000
DEFAULT_CHUNK_SIZE = 500


class IngestionOrchestrator:
    def __init__(
        self,
        documents: DocumentStatusWriter,
        processors: Mapping[IngestBackend, Processor],
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        automatic_backend: IngestBackend = IngestBackend.MOCK,
        manual_backend: IngestBackend = IngestBackend.EXTERNAL,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        uow_factory: Callable[[], UnitOfWork] = UnitOfWork,
    ) -> None:
        missing = {automatic_backend, manual_backend} - set(processors)
        if missing:
            names = ", ".join(sorted(b.value for b in missing))
            raise ValueError(f"No processor registered for backend(s): {names}")
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self._documents = documents
        self._processors = dict(processors)
        self._timeout_ms = timeout_ms
        self._automatic_backend = automatic_backend
        self._manual_backend = manual_backend
        self._chunk_size = chunk_size
        self._uow_factory = uow_factory

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def processor_for(self, backend: IngestBackend) -> Processor:
        return self._processors[backend]

    async def drain(self) -> None:
        """Wait for in-flight processor work (application shutdown)."""
        unique = {id(p): p for p in self._processors.values()}
        for processor in unique.values():
            drain = getattr(processor, "drain", None)
            if drain is not None:
                await drain()

    # --- Triggers ---

    def trigger_automatic_ingestion(self, document_id: str, user_id: str) -> IngestionJobRead:
        """Start ingestion for a freshly stored document. Does not wait for the outcome."""
        return self._start(document_id, user_id, self._automatic_backend)

    def trigger_ingestion(self, document_id: str, requester: Requester) -> IngestionJobRead:
        """Manual (re)ingestion on behalf of *requester*.

        The requester's own access to the document is checked, and a document
        with a PENDING or PROCESSING job is rejected with ConflictError.
        """
        if not document_id:
            raise BadInputError("document_id is required")
        with self._uow_factory() as uow:
            document = DocumentRepository(uow.session).get_active(document_id)
            if document is None:
                raise NotFoundError("Document not found")
            ensure_access(requester, document.uploaded_by)
            if IngestionJobRepository(uow.session).has_active_job(document_id):
                raise ConflictError(f"Document {document_id} already has an ingestion in progress")
        return self._start(document_id, requester.id, self._manual_backend)

    def _start(self, document_id: str, user_id: str, backend: IngestBackend) -> IngestionJobRead:
        if not document_id:
            raise BadInputError("document_id is required")
        if not user_id:
            raise BadInputError("user_id is required")
        logger.info("Starting %s ingestion for document %s", backend.value, document_id)

        # 1. Document first, so no job ever exists for a document still UPLOADED.
        self._documents.update_status(document_id, DocumentStatus.PROCESSING)

        # 2. Job record
        try:
            with self._uow_factory() as uow:
                job_id = IngestionJobRepository(uow.session).create(
                    document_id=document_id, user_id=user_id,
                ).id
        except Exception:
            logger.exception("Could not create ingestion job for document %s", document_id)
            self._documents.update_status(document_id, DocumentStatus.FAILED)
            raise

        # 3. Dispatch; the processor owns the deadline from here on.
        self.update_job_status(job_id, IngestionStatus.PROCESSING)

        def on_complete(status: IngestionStatus, error_message: str | None = None) -> None:
            self.handle_ingestion_complete(document_id, job_id, status, error_message)

        try:
            self._processors[backend].process_with_timeout(
                job_id, document_id, self._timeout_ms, on_complete,
            )
        except Exception as exc:
            logger.exception("Could not dispatch ingestion job %s", job_id)
            self.handle_ingestion_complete(
                document_id, job_id, IngestionStatus.FAILED, f"Failed to dispatch ingestion: {exc}",
            )

        return self._read_job(job_id)

    # --- Completion ---

    def handle_ingestion_complete(
        self,
        document_id: str,
        job_id: str,
        status: IngestionStatus,
        error_message: str | None = None,
    ) -> None:
        """Apply a processor outcome. Never raises; never leaves the document PROCESSING.

        The job's terminal status, the document status and (on success) the
        chunks commit in one unit of work, so a failure part-way rolls all of
        them back and the job can still be recorded as FAILED.
        """
        try:
            status = IngestionStatus(status)
            if not status.is_terminal:
                raise BadInputError(f"Completion status must be terminal, got {status.value}")
            with self._uow_factory() as uow:
                try:
                    self.update_job_status(job_id, status, error_message, uow=uow)
                except ConflictError:
                    logger.warning("Ignoring duplicate %s completion for job %s", status.value, job_id)
                    return

                if status is IngestionStatus.COMPLETED:
                    self._documents.update_status(document_id, DocumentStatus.PROCESSED, uow=uow)
                    count = self.create_document_chunks(document_id, uow=uow)
                else:
                    self._documents.update_status(document_id, DocumentStatus.FAILED, uow=uow)

            if status is IngestionStatus.COMPLETED:
                logger.info("Document %s successfully processed (%d chunks)", document_id, count)
            else:
                logger.info("Document %s processing failed: %s", document_id, error_message)
        except Exception as exc:
            logger.exception("Error handling ingestion completion for document %s", document_id)
            self._contain_failure(document_id, job_id, exc)

    def _contain_failure(self, document_id: str, job_id: str, exc: Exception) -> None:
        failure = CompletionHandlerFailure(f"Completion handling failed: {exc}")
        try:
            with self._uow_factory() as uow:
                repo = IngestionJobRepository(uow.session)
                job = repo.get_active(job_id)
                if job is not None and not job.status.is_terminal:
                    repo.apply_status(job, IngestionStatus.FAILED, failure.message)
        except Exception:
            logger.exception("Could not mark ingestion job %s FAILED", job_id)
        try:
            self._documents.update_status(document_id, DocumentStatus.FAILED)
        except Exception:
            logger.exception("Could not mark document %s FAILED", document_id)

    def update_job_status(
        self,
        job_id: str,
        status: IngestionStatus,
        error_message: str | None = None,
        uow: UnitOfWork | None = None,
    ) -> IngestionJobRead:
        """Set status/updated_at; terminal statuses also set completed_at, exactly once."""
        with joined(uow, self._uow_factory) as active:
            repo = IngestionJobRepository(active.session)
            job = repo.get_active(job_id)
            if job is None:
                raise NotFoundError(f"Ingestion job {job_id} not found")
            if job.status.is_terminal:
                raise ConflictError(f"Ingestion job {job_id} is already {job.status.value}")
            repo.apply_status(job, status, error_message)
            return IngestionJobRead.model_validate(job)

    # --- Chunks ---

    def create_document_chunks(self, document_id: str, uow: UnitOfWork | None = None) -> int:
        """Synthesize the document's chunks, replacing any from an earlier run.

        Returns how many were written; indices always run 0..N-1.
        """
        with joined(uow, self._uow_factory) as active:
            document = DocumentRepository(active.session).get_by_id(document_id)
            if document is None:
                logger.error("Document %s not found for chunking", document_id)
                return 0

            content = generate_mock_document_content(
                document.title or document.original_name, document.mimetype,
            )
            chunks = split_text_into_chunks(content, self._chunk_size)
            repo = ChunkRepository(active.session)
            retired = repo.soft_delete_by_document(document_id)
            if retired:
                logger.info("Retired %d earlier chunks for document %s", retired, document_id)
            repo.create_batch(
                document_id,
                chunks,
                [chunk_metadata(document.title, document.filename, chunk) for chunk in chunks],
            )
            logger.info("Created %d chunks for document %s", len(chunks), document_id)
            return len(chunks)

    # --- Reads ---

    def _read_job(self, job_id: str) -> IngestionJobRead:
        with self._uow_factory() as uow:
            job = IngestionJobRepository(uow.session).get_active(job_id)
            if job is None:
                raise NotFoundError("Ingestion job not found")
            return IngestionJobRead.model_validate(job)

    def get_ingestion_job(self, job_id: str, requester: Requester) -> IngestionJobRead:
        job = self._read_job(job_id)
        ensure_access(requester, job.user_id)
        return job

    def get_ingestion_jobs(self, query: IngestionJobsQuery, requester: Requester) -> IngestionJobList:
        owner_id = requester.owner_filter()
        with self._uow_factory() as uow:
            repo = IngestionJobRepository(uow.session)
            jobs = repo.list_jobs(
                owner_id=owner_id,
                status=query.status,
                limit=query.limit,
                offset=(query.page - 1) * query.limit,
            )
            total = repo.count_jobs(owner_id=owner_id, status=query.status)
            return IngestionJobList(
                jobs=[IngestionJobRead.model_validate(j) for j in jobs],
                pagination=Pagination.of(total, query.page, query.limit),
            )
