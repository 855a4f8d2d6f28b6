"""Q&A use-case service: conversations, messages and retrieval for the mock assistant."""
from __future__ import annotations
import logging
from docqa.api.schemas.documents import MessageResponse
from docqa.api.schemas.qna import (
    ConversationCreate,
    ConversationList,
    ConversationRead,
    ConversationRename,
    ConversationsQuery,
    MessageRead,
    SendMessageRequest,
    SendMessageResponse,
)
from docqa.domain.exceptions import NotFoundError
from docqa.domain.statuses import MessageRole
from docqa.infra.db.repositories.chunk_repository import ChunkRepository
from docqa.infra.db.repositories.conversation_repository import ConversationRepository
from docqa.infra.db.uow import UnitOfWork
from docqa.models.core import utcnow
from docqa.models.qna import Conversation
from docqa.services.assistant import (
    ERROR_REPLY,
    AssistantReply,
    MockAssistant,
    filter_by_keyword,
)

logger = logging.getLogger(__name__)

EXPLICIT_DOCUMENTS_CHUNK_LIMIT = 5
ALL_DOCUMENTS_CHUNK_LIMIT = 10


class QnaService:
    def __init__(self, uow: UnitOfWork, assistant: MockAssistant | None = None) -> None:
        self._uow = uow
        self._assistant = assistant or MockAssistant()

    def _get_owned(self, user_id: str, conversation_id: str) -> Conversation:
        conversation = ConversationRepository(self._uow.session).get_owned(conversation_id, user_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        return conversation

    def _to_read(self, conversation: Conversation, messages) -> ConversationRead:
        return ConversationRead.model_validate(conversation).model_copy(
            update={"messages": [MessageRead.model_validate(m) for m in messages]},
        )

    # --- Conversations ---

    def create_conversation(self, user_id: str, payload: ConversationCreate) -> ConversationRead:
        conversation = ConversationRepository(self._uow.session).create(
            user_id=user_id, title=payload.title,
        )
        self._uow.commit()
        return self._to_read(conversation, [])

    def list_conversations(self, user_id: str, query: ConversationsQuery) -> ConversationList:
        repo = ConversationRepository(self._uow.session)
        conversations = repo.list_owned(
            user_id, search=query.search, limit=query.limit, offset=query.offset,
        )
        items = []
        for c in conversations:
            latest = repo.latest_message(c.id)  # preview only
            items.append(self._to_read(c, [latest] if latest else []))
        return ConversationList(
            conversations=items,
            total=repo.count_owned(user_id, search=query.search),
            limit=query.limit,
            offset=query.offset,
        )

    def get_conversation(self, user_id: str, conversation_id: str) -> ConversationRead:
        conversation = self._get_owned(user_id, conversation_id)
        messages = ConversationRepository(self._uow.session).list_messages(conversation.id)
        return self._to_read(conversation, messages)

    def rename_conversation(
        self, user_id: str, conversation_id: str, payload: ConversationRename,
    ) -> ConversationRead:
        conversation = self._get_owned(user_id, conversation_id)
        conversation.title = payload.title
        conversation.updated_at = utcnow()
        self._uow.session.add(conversation)
        self._uow.commit()
        return self.get_conversation(user_id, conversation_id)

    def delete_conversation(self, user_id: str, conversation_id: str) -> MessageResponse:
        conversation = self._get_owned(user_id, conversation_id)
        ConversationRepository(self._uow.session).soft_delete(conversation)
        self._uow.commit()
        return MessageResponse(message="Conversation deleted successfully")

    # --- Messages ---

    def send_message(self, user_id: str, payload: SendMessageRequest) -> SendMessageResponse:
        conversation = self._get_owned(user_id, payload.conversation_id)
        repo = ConversationRepository(self._uow.session)

        user_message = repo.add_message(
            conversation_id=conversation.id,
            user_id=user_id,
            role=MessageRole.USER,
            content=payload.content,
        )
        reply = self._generate_reply(user_id, payload.content, payload.document_ids)
        assistant_message = repo.add_message(
            conversation_id=conversation.id,
            user_id=user_id,
            role=MessageRole.ASSISTANT,
            content=reply.content,
            meta=reply.metadata,
        )
        repo.touch(conversation)
        self._uow.commit()
        return SendMessageResponse(
            user_message=MessageRead.model_validate(user_message),
            assistant_message=MessageRead.model_validate(assistant_message),
        )

    def _generate_reply(
        self, user_id: str, question: str, document_ids: list[str] | None,
    ) -> AssistantReply:
        try:
            chunks = ChunkRepository(self._uow.session)
            if document_ids:
                candidates = chunks.list_for_owned_documents(
                    document_ids, user_id, limit=EXPLICIT_DOCUMENTS_CHUNK_LIMIT,
                )
            else:
                candidates = chunks.list_processed_for_owner(user_id, limit=ALL_DOCUMENTS_CHUNK_LIMIT)
            return self._assistant.answer(question, filter_by_keyword(candidates, question))
        except Exception:
            logger.exception("Error generating assistant reply for user %s", user_id)
            return AssistantReply(content=ERROR_REPLY, metadata={"error": True, "sources": []})
