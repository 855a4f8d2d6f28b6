"""Mock assistant: keyword retrieval over chunks plus canned, context-quoting answers.

There is no LLM here. The reply quotes the retrieved context and cites the
chunks it came from, which is enough to exercise the RAG plumbing end to end.
"""
from __future__ import annotations
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

MOCK_MODEL = "mock-model-v1"
SOURCE_PREVIEW_CHARS = 200
CONTEXT_PREVIEW_CHARS = 300

NO_CONTEXT_REPLY = (
    "I don't have any relevant documents to answer your question. "
    "Please make sure you have uploaded and processed documents first."
)
ERROR_REPLY = (
    "I apologize, but I encountered an error while processing your request. Please try again."
)

_OPENINGS = (
    "Based on the documents you've provided, {question} relates to the following key points from your content...",
    "According to your uploaded documents, I can provide the following insights about your question...",
    "From the analysis of your documents, here's what I found regarding your inquiry...",
    "Based on the processed content in your documents, I can answer your question as follows...",
)


class ChunkLike(Protocol):
    id: str
    document_id: str
    content: str


@dataclass
class AssistantReply:
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


def first_keyword(question: str) -> str:
    return question.lower().split(" ")[0]


def filter_by_keyword(chunks: Iterable[ChunkLike], question: str) -> list[ChunkLike]:
    keyword = first_keyword(question)
    return [c for c in chunks if keyword in c.content.lower()]


class MockAssistant:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def answer(self, question: str, chunks: Sequence[ChunkLike]) -> AssistantReply:
        sources = [
            {
                "document_id": c.document_id,
                "chunk_id": c.id,
                "content": c.content[:SOURCE_PREVIEW_CHARS] + "...",
            }
            for c in chunks
        ]
        metadata = {
            "sources": sources,
            "tokens_used": self._rng.randint(500, 1499),
            "model": MOCK_MODEL,
            "processing_time": self._rng.randint(500, 2499),
        }
        context = "\n\n".join(c.content for c in chunks)
        if not context:
            return AssistantReply(content=NO_CONTEXT_REPLY, metadata=metadata)

        opening = self._rng.choice(_OPENINGS).format(question=question.lower())
        content = (
            f"{opening}\n\n{context[:CONTEXT_PREVIEW_CHARS]}...\n\n"
            "This information is based on your uploaded documents. "
            "Would you like me to elaborate on any specific aspect?"
        )
        return AssistantReply(content=content, metadata=metadata)
