"""Repository for Conversation and Message records. No business logic."""
from __future__ import annotations
from typing import Any
from sqlalchemy import func
from sqlmodel import Session, col, desc, select
from docqa.domain.statuses import MessageRole
from docqa.models.core import utcnow
from docqa.models.qna import Conversation, Message


class ConversationRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    # --- Conversation ---

    def get_owned(self, conversation_id: str, user_id: str) -> Conversation | None:
        return self._s.exec(
            select(Conversation).where(
                Conversation.id == conversation_id,
                Conversation.user_id == user_id,
                Conversation.is_deleted == False,  # noqa: E712
            )
        ).first()

    def _owned(self, stmt, user_id: str, search: str | None):
        stmt = stmt.where(Conversation.user_id == user_id, Conversation.is_deleted == False)  # noqa: E712
        if search:
            stmt = stmt.where(col(Conversation.title).ilike(f"%{search}%"))
        return stmt

    def list_owned(
        self, user_id: str, *, search: str | None = None, limit: int = 20, offset: int = 0,
    ) -> list[Conversation]:
        stmt = self._owned(select(Conversation), user_id, search)
        stmt = stmt.order_by(desc(Conversation.updated_at)).offset(offset).limit(limit)
        return list(self._s.exec(stmt).all())

    def count_owned(self, user_id: str, *, search: str | None = None) -> int:
        stmt = self._owned(select(func.count()).select_from(Conversation), user_id, search)
        return self._s.exec(stmt).one()

    def create(self, *, user_id: str, title: str | None) -> Conversation:
        conversation = Conversation(user_id=user_id, title=title)
        self._s.add(conversation)
        self._s.flush()
        return conversation

    def touch(self, conversation: Conversation) -> None:
        conversation.updated_at = utcnow()
        self._s.add(conversation)

    def soft_delete(self, conversation: Conversation) -> None:
        now = utcnow()
        conversation.is_deleted = True
        conversation.updated_at = now
        self._s.add(conversation)
        for message in self.list_messages(conversation.id):
            message.is_deleted = True
            message.updated_at = now
            self._s.add(message)

    # --- Message ---

    def list_messages(self, conversation_id: str) -> list[Message]:
        return list(self._s.exec(
            select(Message)
            .where(Message.conversation_id == conversation_id, Message.is_deleted == False)  # noqa: E712
            .order_by(Message.created_at)
        ).all())

    def latest_message(self, conversation_id: str) -> Message | None:
        return self._s.exec(
            select(Message)
            .where(Message.conversation_id == conversation_id, Message.is_deleted == False)  # noqa: E712
            .order_by(desc(Message.created_at))
        ).first()

    def add_message(
        self,
        *,
        conversation_id: str,
        user_id: str,
        role: MessageRole,
        content: str,
        meta: dict[str, Any] | None = None,
    ) -> Message:
        message = Message(
            conversation_id=conversation_id,
            user_id=user_id,
            role=role,
            content=content,
            meta=meta or {},
        )
        self._s.add(message)
        self._s.flush()
        return message
