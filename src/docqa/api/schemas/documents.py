"""Document DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import AliasChoices, BaseModel, Field, field_validator
from docqa.api.schemas.ingest import Pagination
from docqa.domain.statuses import DocumentStatus


class DocumentRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    filename: str
    original_name: str
    mimetype: str
    size: int
    title: str
    description: str | None = None
    status: DocumentStatus
    uploaded_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentList(BaseModel):
    documents: list[DocumentRead]
    pagination: Pagination


class DocumentUpdate(BaseModel):
    title: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("title must not be blank")
        return v


class ChunkRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    document_id: str
    content: str
    chunk_index: int
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata"),
    )
    created_at: datetime | None = None


class ChunkList(BaseModel):
    items: list[ChunkRead]
    total: int


class MessageResponse(BaseModel):
    message: str
