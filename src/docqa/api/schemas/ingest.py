"""Ingestion DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from docqa.domain.statuses import IngestionStatus


class TriggerIngestionRequest(BaseModel):
    document_id: str

    @field_validator("document_id")
    @classmethod
    def document_id_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("document_id must not be empty")
        return v.strip()


class IngestionJobsQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    status: IngestionStatus | None = None


class IngestionJobRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    document_id: str
    user_id: str
    status: IngestionStatus
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def of(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, pages=-(-total // limit))


class IngestionJobList(BaseModel):
    jobs: list[IngestionJobRead]
    pagination: Pagination
