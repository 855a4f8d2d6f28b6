"""Q&A router."""
from fastapi import APIRouter, Depends, Query
from docqa.api.deps import get_requester, get_uow
from docqa.api.schemas.documents import MessageResponse
from docqa.api.schemas.qna import (
    ConversationCreate,
    ConversationList,
    ConversationRead,
    ConversationRename,
    ConversationsQuery,
    SendMessageRequest,
    SendMessageResponse,
)
from docqa.domain.access import Requester
from docqa.infra.db.uow import UnitOfWork
from docqa.services.qna_service import QnaService

router = APIRouter(prefix="/qna", tags=["qna"])


@router.post("/conversations", response_model=ConversationRead, status_code=201)
def create_conversation(
    payload: ConversationCreate,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> ConversationRead:
    return QnaService(uow).create_conversation(requester.id, payload)


@router.get("/conversations", response_model=ConversationList)
def list_conversations(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    search: str | None = None,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> ConversationList:
    query = ConversationsQuery(limit=limit, offset=offset, search=search)
    return QnaService(uow).list_conversations(requester.id, query)


@router.get("/conversations/{conversation_id}", response_model=ConversationRead)
def get_conversation(
    conversation_id: str,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> ConversationRead:
    return QnaService(uow).get_conversation(requester.id, conversation_id)


@router.patch("/conversations/{conversation_id}", response_model=ConversationRead)
def rename_conversation(
    conversation_id: str,
    payload: ConversationRename,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> ConversationRead:
    return QnaService(uow).rename_conversation(requester.id, conversation_id, payload)


@router.delete("/conversations/{conversation_id}", response_model=MessageResponse)
def delete_conversation(
    conversation_id: str,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> MessageResponse:
    return QnaService(uow).delete_conversation(requester.id, conversation_id)


@router.post("/messages", response_model=SendMessageResponse, status_code=201)
def send_message(
    payload: SendMessageRequest,
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> SendMessageResponse:
    return QnaService(uow).send_message(requester.id, payload)
