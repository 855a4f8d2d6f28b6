"""Documents use-case service. Owns ORM→DTO mapping; routers never see ORM objects."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from docqa.api.schemas.documents import (
    ChunkList,
    ChunkRead,
    DocumentList,
    DocumentRead,
    DocumentUpdate,
    MessageResponse,
)
from docqa.api.schemas.ingest import Pagination
from docqa.config import settings
from docqa.domain.access import Requester, ensure_access
from docqa.domain.exceptions import BadInputError, NotFoundError
from docqa.domain.statuses import DocumentStatus
from docqa.infra.db.repositories.chunk_repository import ChunkRepository
from docqa.infra.db.repositories.document_repository import DocumentRepository
from docqa.infra.db.uow import UnitOfWork
from docqa.models.core import Document, utcnow
from docqa.storage.files import save_upload

logger = logging.getLogger(__name__)


class IngestionTrigger(Protocol):
    """What document upload needs from ingestion: start it, don't wait for it."""

    def trigger_automatic_ingestion(self, document_id: str, user_id: str) -> object:
        ...


@dataclass(frozen=True)
class DocumentFile:
    """A stored upload ready to be streamed back under its original name."""

    path: Path
    filename: str
    mimetype: str


class DocumentsService:
    def __init__(self, uow: UnitOfWork, trigger: IngestionTrigger | None = None) -> None:
        self._uow = uow
        self._trigger = trigger

    def _get_visible(self, document_id: str, requester: Requester) -> Document:
        document = DocumentRepository(self._uow.session).get_active(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        ensure_access(requester, document.uploaded_by)
        return document

    def create(
        self,
        *,
        content: bytes,
        original_filename: str,
        content_type: str,
        user_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> DocumentRead:
        if not content:
            raise BadInputError("File is required")

        stored_name, stored_path = save_upload(settings.upload_dir, content, original_filename)
        repo = DocumentRepository(self._uow.session)
        document = repo.create(
            filename=stored_name,
            original_name=original_filename,
            mimetype=content_type,
            size=len(content),
            file_path=str(stored_path),
            title=(title or "").strip() or original_filename,
            description=description,
            uploaded_by=user_id,
        )
        # Ingestion works in its own sessions; the row must be visible to them.
        self._uow.commit()

        if self._trigger is not None:
            try:
                self._trigger.trigger_automatic_ingestion(document.id, user_id)
                logger.info("Automatic ingestion triggered for document %s", document.id)
            except Exception:
                # Upload succeeds even if ingestion could not start.
                logger.exception("Failed to trigger automatic ingestion for document %s", document.id)
            self._uow.session.refresh(document)

        return DocumentRead.model_validate(document)

    def find_all(self, requester: Requester, page: int = 1, limit: int = 10) -> DocumentList:
        repo = DocumentRepository(self._uow.session)
        owner_id = requester.owner_filter()
        documents = repo.list_active(owner_id=owner_id, limit=limit, offset=(page - 1) * limit)
        total = repo.count_active(owner_id=owner_id)
        return DocumentList(
            documents=[DocumentRead.model_validate(d) for d in documents],
            pagination=Pagination.of(total, page, limit),
        )

    def find_one(self, document_id: str, requester: Requester) -> DocumentRead:
        return DocumentRead.model_validate(self._get_visible(document_id, requester))

    def update(self, document_id: str, payload: DocumentUpdate, requester: Requester) -> DocumentRead:
        document = self._get_visible(document_id, requester)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(document, field, value)
        if changes:
            document.updated_at = utcnow()
            self._uow.session.add(document)
            self._uow.commit()
        return DocumentRead.model_validate(document)

    def remove(self, document_id: str, requester: Requester) -> MessageResponse:
        document = self._get_visible(document_id, requester)
        # The stored file is kept on disk so a soft delete stays reversible.
        DocumentRepository(self._uow.session).soft_delete(document)
        self._uow.commit()
        return MessageResponse(message="Document deleted successfully")

    def find_by_status(self, status: DocumentStatus) -> list[DocumentRead]:
        documents = DocumentRepository(self._uow.session).list_by_status(status)
        return [DocumentRead.model_validate(d) for d in documents]

    def list_chunks(self, document_id: str, requester: Requester) -> ChunkList:
        self._get_visible(document_id, requester)
        chunks = ChunkRepository(self._uow.session).list_by_document(document_id)
        return ChunkList(items=[ChunkRead.model_validate(c) for c in chunks], total=len(chunks))

    def get_file(self, document_id: str, requester: Requester) -> DocumentFile:
        document = self._get_visible(document_id, requester)
        path = Path(document.file_path)
        if not path.is_file():
            logger.warning("Stored file for document %s is missing: %s", document_id, path)
            raise NotFoundError("File not found on disk")
        return DocumentFile(path=path, filename=document.original_name, mimetype=document.mimetype)
