"""Unit tests for sentence-greedy chunk splitting and mock content synthesis."""
import pytest
from docqa.ingest.chunking import (
    CHUNK_PRODUCER,
    chunk_metadata,
    generate_mock_document_content,
    split_text_into_chunks,
)


def test_empty_text_yields_no_chunks():
    assert split_text_into_chunks("", 100) == []


def test_non_positive_max_is_rejected():
    with pytest.raises(ValueError):
        split_text_into_chunks("Some text", 0)


def test_short_text_is_single_chunk():
    assert split_text_into_chunks("One. Two. Three", 100) == ["One. Two. Three"]


def test_sentences_are_packed_greedily():
    text = "aaaa. bbbb. cccc"
    # "aaaa. bbbb" is 10 chars; adding ". cccc" would make 16.
    assert split_text_into_chunks(text, 10) == ["aaaa. bbbb", "cccc"]


def test_long_sentence_is_hard_split_and_remainder_carried():
    text = "x" * 25
    chunks = split_text_into_chunks(text, 10)
    assert chunks[0] == "x" * 10
    # The remainder stays in the accumulator and is emitted as-is.
    assert chunks[1] == "x" * 15
    assert "".join(chunks) == text


def test_blank_chunks_are_dropped():
    assert split_text_into_chunks("   ", 100) == []


def test_chunks_fit_and_preserve_order_for_generated_content():
    content = generate_mock_document_content("Quarterly Report", "application/pdf")
    chunks = split_text_into_chunks(content, 500)
    assert len(chunks) > 1
    assert all(0 < len(c) <= 500 for c in chunks)
    assert ". ".join(chunks) == content


def test_generated_content_names_document_and_kind():
    pdf = generate_mock_document_content("Handbook", "application/pdf")
    other = generate_mock_document_content("Handbook", "text/plain")
    assert '"Handbook"' in pdf
    assert "This PDF provides" in pdf
    assert "This document provides" in other
    assert pdf.count("\n\n") == 5


def test_chunk_metadata_shape():
    meta = chunk_metadata("Title", "stored.pdf", "hello")
    assert meta == {
        "document_title": "Title",
        "document_filename": "stored.pdf",
        "chunk_length": 5,
        "created_by": CHUNK_PRODUCER,
    }


def test_four_sentences_at_thirty_chars():
    text = "First sentence. Second sentence. Third sentence. Fourth sentence."
    chunks = split_text_into_chunks(text, 30)
    assert chunks == ["First sentence", "Second sentence", "Third sentence", "Fourth sentence."]


def test_oversized_sentence_first_chunk_is_exact_prefix():
    sentence = "".join(chr(ord("a") + i % 26) for i in range(100))
    chunks = split_text_into_chunks(sentence, 20)
    assert chunks[0] == sentence[:20]
    assert "".join(chunks) == sentence
