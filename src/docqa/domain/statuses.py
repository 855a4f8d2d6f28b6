"""Status and role vocabularies shared by ORM models, DTOs and processors."""
from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class DocumentStatus(str, Enum):
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"


class IngestionStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_INGESTION_STATUSES


TERMINAL_INGESTION_STATUSES = frozenset({IngestionStatus.COMPLETED, IngestionStatus.FAILED})
ACTIVE_INGESTION_STATUSES = frozenset({IngestionStatus.PENDING, IngestionStatus.PROCESSING})


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
