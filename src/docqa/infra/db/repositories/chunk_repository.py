"""Repository for DocumentChunk records. No business logic; caller owns the transaction."""
from __future__ import annotations
from collections.abc import Sequence
from typing import Any
from sqlmodel import Session, col, select
from docqa.domain.statuses import DocumentStatus
from docqa.models.core import Document, DocumentChunk


class ChunkRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def create_batch(
        self, document_id: str, contents: Sequence[str], metadata: Sequence[dict[str, Any]],
    ) -> list[DocumentChunk]:
        """Insert one chunk per content string with chunk_index 0..N-1."""
        chunks = [
            DocumentChunk(document_id=document_id, content=content, chunk_index=index, meta=meta)
            for index, (content, meta) in enumerate(zip(contents, metadata, strict=True))
        ]
        self._s.add_all(chunks)
        self._s.flush()
        return chunks

    def soft_delete_by_document(self, document_id: str) -> int:
        """Retire every live chunk of a document; returns how many were marked."""
        chunks = self.list_by_document(document_id)
        for chunk in chunks:
            chunk.is_deleted = True
            self._s.add(chunk)
        self._s.flush()
        return len(chunks)

    def list_by_document(self, document_id: str) -> list[DocumentChunk]:
        return list(self._s.exec(
            select(DocumentChunk)
            .where(DocumentChunk.document_id == document_id, DocumentChunk.is_deleted == False)  # noqa: E712
            .order_by(DocumentChunk.chunk_index)
        ).all())

    def list_for_owned_documents(
        self, document_ids: Sequence[str], owner_id: str, *, limit: int = 5,
    ) -> list[DocumentChunk]:
        stmt = (
            select(DocumentChunk)
            .join(Document, Document.id == DocumentChunk.document_id)
            .where(
                col(DocumentChunk.document_id).in_(list(document_ids)),
                DocumentChunk.is_deleted == False,  # noqa: E712
                Document.uploaded_by == owner_id,
                Document.is_deleted == False,  # noqa: E712
            )
            .order_by(DocumentChunk.document_id, DocumentChunk.chunk_index)
            .limit(limit)
        )
        return list(self._s.exec(stmt).all())

    def list_processed_for_owner(self, owner_id: str, *, limit: int = 10) -> list[DocumentChunk]:
        stmt = (
            select(DocumentChunk)
            .join(Document, Document.id == DocumentChunk.document_id)
            .where(
                DocumentChunk.is_deleted == False,  # noqa: E712
                Document.uploaded_by == owner_id,
                Document.is_deleted == False,  # noqa: E712
                Document.status == DocumentStatus.PROCESSED,
            )
            .order_by(DocumentChunk.document_id, DocumentChunk.chunk_index)
            .limit(limit)
        )
        return list(self._s.exec(stmt).all())
