"""ORM table models. Importing this package registers every mapper."""
from docqa.models.core import Document, DocumentChunk, IngestionJob, User
from docqa.models.qna import Conversation, Message

__all__ = [
    "Conversation",
    "Document",
    "DocumentChunk",
    "IngestionJob",
    "Message",
    "User",
]
