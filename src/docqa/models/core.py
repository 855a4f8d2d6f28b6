"""Users, documents, chunks and ingestion jobs."""
import uuid
from datetime import datetime, timezone
from typing import Any
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel
from docqa.domain.statuses import DocumentStatus, IngestionStatus, UserRole


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str
    role: UserRole = Field(default=UserRole.VIEWER)
    is_active: bool = True
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Document(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    filename: str
    original_name: str
    mimetype: str
    size: int
    file_path: str
    title: str
    description: str | None = None
    status: DocumentStatus = Field(default=DocumentStatus.UPLOADED, index=True)
    uploaded_by: str = Field(foreign_key="user.id", index=True)
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class DocumentChunk(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    document_id: str = Field(foreign_key="document.id", index=True)
    content: str
    chunk_index: int
    # Always null while ingestion is mocked.
    embedding: list[float] | None = Field(default=None, sa_column=Column(JSON))
    meta: dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON))
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class IngestionJob(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    document_id: str = Field(foreign_key="document.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    status: IngestionStatus = Field(default=IngestionStatus.PENDING, index=True)
    error_message: str | None = None
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
