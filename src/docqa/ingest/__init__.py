"""Ingestion backends and chunk synthesis."""

from docqa.ingest.chunking import generate_mock_document_content, split_text_into_chunks
from docqa.ingest.processors import (
    CompletionCallback,
    ExternalProcessor,
    IngestBackend,
    MockProcessor,
    Processor,
)

__all__ = [
    "CompletionCallback",
    "ExternalProcessor",
    "IngestBackend",
    "MockProcessor",
    "Processor",
    "generate_mock_document_content",
    "split_text_into_chunks",
]
