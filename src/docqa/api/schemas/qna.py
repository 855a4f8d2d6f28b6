"""Q&A DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import AliasChoices, BaseModel, Field, field_validator
from docqa.domain.statuses import MessageRole


class ConversationCreate(BaseModel):
    title: str | None = None


class ConversationRename(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v


class ConversationsQuery(BaseModel):
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    search: str | None = None


class MessageRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata"),
    )
    created_at: datetime | None = None


class ConversationRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    user_id: str
    title: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    messages: list[MessageRead] = []


class ConversationList(BaseModel):
    conversations: list[ConversationRead]
    total: int
    limit: int
    offset: int


class SendMessageRequest(BaseModel):
    conversation_id: str
    content: str
    document_ids: list[str] | None = None

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be empty")
        return v


class SendMessageResponse(BaseModel):
    user_message: MessageRead
    assistant_message: MessageRead
