"""Repository for Document records. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session, desc, select
from docqa.domain.statuses import DocumentStatus
from docqa.models.core import Document, utcnow


class DocumentRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_by_id(self, document_id: str) -> Document | None:
        """Fetch regardless of soft-delete state."""
        return self._s.get(Document, document_id)

    def get_active(self, document_id: str) -> Document | None:
        return self._s.exec(
            select(Document).where(Document.id == document_id, Document.is_deleted == False)  # noqa: E712
        ).first()

    def list_active(
        self, *, owner_id: str | None = None, limit: int = 10, offset: int = 0,
    ) -> list[Document]:
        stmt = select(Document).where(Document.is_deleted == False)  # noqa: E712
        if owner_id is not None:
            stmt = stmt.where(Document.uploaded_by == owner_id)
        stmt = stmt.order_by(desc(Document.created_at)).offset(offset).limit(limit)
        return list(self._s.exec(stmt).all())

    def count_active(self, *, owner_id: str | None = None) -> int:
        stmt = select(func.count()).select_from(Document).where(Document.is_deleted == False)  # noqa: E712
        if owner_id is not None:
            stmt = stmt.where(Document.uploaded_by == owner_id)
        return self._s.exec(stmt).one()

    def list_by_status(self, status: DocumentStatus) -> list[Document]:
        return list(self._s.exec(
            select(Document)
            .where(Document.status == status, Document.is_deleted == False)  # noqa: E712
            .order_by(Document.created_at)
        ).all())

    def create(
        self,
        *,
        filename: str,
        original_name: str,
        mimetype: str,
        size: int,
        file_path: str,
        title: str,
        description: str | None,
        uploaded_by: str,
    ) -> Document:
        document = Document(
            filename=filename,
            original_name=original_name,
            mimetype=mimetype,
            size=size,
            file_path=file_path,
            title=title,
            description=description,
            uploaded_by=uploaded_by,
        )
        self._s.add(document)
        self._s.flush()  # get generated PK without committing
        return document

    def set_status(self, document: Document, status: DocumentStatus) -> None:
        document.status = status
        document.updated_at = utcnow()
        self._s.add(document)

    def soft_delete(self, document: Document) -> None:
        document.is_deleted = True
        document.updated_at = utcnow()
        self._s.add(document)
