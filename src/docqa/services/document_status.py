"""Document status projection: the one writer of ``Document.status`` after upload."""
from __future__ import annotations
import logging
from collections.abc import Callable
from typing import Protocol
from docqa.domain.exceptions import NotFoundError
from docqa.domain.statuses import DocumentStatus
from docqa.infra.db.repositories.document_repository import DocumentRepository
from docqa.infra.db.uow import UnitOfWork, joined

logger = logging.getLogger(__name__)


class DocumentStatusWriter(Protocol):
    """Narrow port the ingestion orchestrator uses to drive document status."""

    def update_status(
        self, document_id: str, status: DocumentStatus, uow: UnitOfWork | None = None,
    ) -> None:
        ...


class DocumentStatusProjection:
    """Writes document status inside the caller's unit of work, or its own."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork] = UnitOfWork) -> None:
        self._uow_factory = uow_factory

    def update_status(
        self, document_id: str, status: DocumentStatus, uow: UnitOfWork | None = None,
    ) -> None:
        with joined(uow, self._uow_factory) as active:
            repo = DocumentRepository(active.session)
            document = repo.get_by_id(document_id)
            if document is None:
                raise NotFoundError(f"Document {document_id} not found")
            repo.set_status(document, status)
        logger.debug("Document %s -> %s", document_id, status.value)
