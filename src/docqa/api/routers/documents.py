"""Documents router."""
from fastapi import APIRouter, Depends, Form, Query, UploadFile
from fastapi.responses import FileResponse
from docqa.api.deps import get_ingestion, get_requester, get_uow, require_editor
from docqa.api.schemas.documents import (
    ChunkList,
    DocumentList,
    DocumentRead,
    DocumentUpdate,
    MessageResponse,
)
from docqa.domain.access import Requester
from docqa.infra.db.uow import UnitOfWork
from docqa.services.documents_service import DocumentsService
from docqa.services.ingestion_service import IngestionOrchestrator

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentRead, status_code=201)
async def upload_document(
    file: UploadFile,
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    requester: Requester = Depends(require_editor),
    uow: UnitOfWork = Depends(get_uow),
    ingestion: IngestionOrchestrator = Depends(get_ingestion),
) -> DocumentRead:
    # async: ingestion dispatch schedules its work on the running event loop
    content = await file.read()
    return DocumentsService(uow, trigger=ingestion).create(
        content=content,
        original_filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        user_id=requester.id,
        title=title,
        description=description,
    )


@router.get("", response_model=DocumentList)
def list_documents(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> DocumentList:
    return DocumentsService(uow).find_all(requester, page=page, limit=limit)


@router.get("/{document_id}", response_model=DocumentRead)
def get_document(
    document_id: str,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> DocumentRead:
    return DocumentsService(uow).find_one(document_id, requester)


@router.get("/{document_id}/chunks", response_model=ChunkList)
def list_chunks(
    document_id: str,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> ChunkList:
    return DocumentsService(uow).list_chunks(document_id, requester)


@router.get("/{document_id}/download", response_class=FileResponse)
def download_document(
    document_id: str,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> FileResponse:
    stored = DocumentsService(uow).get_file(document_id, requester)
    return FileResponse(stored.path, media_type=stored.mimetype, filename=stored.filename)


@router.patch("/{document_id}", response_model=DocumentRead)
def update_document(
    document_id: str,
    payload: DocumentUpdate,
    requester: Requester = Depends(require_editor),
    uow: UnitOfWork = Depends(get_uow),
) -> DocumentRead:
    return DocumentsService(uow).update(document_id, payload, requester)


@router.delete("/{document_id}", response_model=MessageResponse)
def remove_document(
    document_id: str,
    requester: Requester = Depends(require_editor),
    uow: UnitOfWork = Depends(get_uow),
) -> MessageResponse:
    return DocumentsService(uow).remove(document_id, requester)
