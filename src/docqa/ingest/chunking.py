"""Mock content synthesis and sentence-greedy chunk splitting.

Text extraction is not real: a successful ingestion produces deterministic
template text built from the document's own metadata, which is then split
into chunks the Q&A assistant can retrieve.
"""
from __future__ import annotations
from typing import Any

SENTENCE_DELIMITER = ". "
CHUNK_PRODUCER = "ingestion-service"


def split_text_into_chunks(text: str, max_chunk_size: int) -> list[str]:
    """Greedily pack ``". "``-delimited sentences into chunks of at most *max_chunk_size*.

    A sentence that does not fit starts a new chunk. A sentence that is longer
    than *max_chunk_size* on its own is hard-split: its first *max_chunk_size*
    characters become a chunk and accumulation continues from the remainder.
    Chunks that are blank after trimming are dropped.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")
    if not text:
        return []

    chunks: list[str] = []
    current = ""
    for sentence in text.split(SENTENCE_DELIMITER):
        candidate = f"{current}{SENTENCE_DELIMITER}{sentence}" if current else sentence
        if len(candidate) <= max_chunk_size:
            current = candidate
        elif current:
            chunks.append(current)
            current = sentence
        else:
            chunks.append(sentence[:max_chunk_size])
            current = sentence[max_chunk_size:]

    if current:
        chunks.append(current)

    return [chunk for chunk in chunks if chunk.strip()]


def generate_mock_document_content(title: str, mimetype: str) -> str:
    """Stand-in for text extraction: a fixed set of sections naming the document."""
    kind = "PDF" if "pdf" in (mimetype or "").lower() else "document"
    sections = [
        f'This document titled "{title}" contains comprehensive information about various topics. '
        "The document discusses key concepts, methodologies, and findings that are relevant to the "
        "subject matter. It provides detailed analysis and insights that can be useful for "
        "understanding the core principles.",
        f"Introduction: This {kind} provides an overview of important topics and concepts. "
        "The content is organized into several sections that cover different aspects of the "
        "subject matter.",
        "Main Content: The document explores various themes and presents detailed information "
        "about the topic. It includes analysis, examples, and explanations that help readers "
        "understand the key points being discussed.",
        "Analysis Section: This part of the document contains analytical content that examines "
        "different perspectives and approaches to the subject matter. The analysis is supported "
        "by examples and case studies.",
        "Conclusion: The document concludes with a summary of the main findings and "
        "recommendations. It provides actionable insights and suggestions for further "
        "exploration of the topic.",
        "Technical Details: This section contains technical information and specifications "
        "related to the subject matter. It includes detailed explanations of processes, "
        "methodologies, and best practices.",
    ]
    return "\n\n".join(sections)


def chunk_metadata(document_title: str, document_filename: str, chunk: str) -> dict[str, Any]:
    return {
        "document_title": document_title,
        "document_filename": document_filename,
        "chunk_length": len(chunk),
        "created_by": CHUNK_PRODUCER,
    }
