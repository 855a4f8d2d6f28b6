"""Composition root: builds the ingestion orchestrator and its collaborators from settings."""
from __future__ import annotations
import random
from docqa.config import Settings, settings as default_settings
from docqa.ingest.processors import ExternalProcessor, IngestBackend, MockProcessor
from docqa.services.document_status import DocumentStatusProjection
from docqa.services.ingestion_service import IngestionOrchestrator


def build_mock_processor(cfg: Settings) -> MockProcessor:
    rng = random.Random(cfg.MOCK_INGEST_SEED) if cfg.MOCK_INGEST_SEED is not None else None
    return MockProcessor(success_rate=cfg.MOCK_INGEST_SUCCESS_RATE, rng=rng)


def build_ingestion_orchestrator(cfg: Settings | None = None) -> IngestionOrchestrator:
    cfg = cfg or default_settings
    mock = build_mock_processor(cfg)
    external = ExternalProcessor(fallback=mock, service_url=cfg.INGEST_SERVICE_URL)
    return IngestionOrchestrator(
        documents=DocumentStatusProjection(),
        processors={IngestBackend.MOCK: mock, IngestBackend.EXTERNAL: external},
        timeout_ms=cfg.INGESTION_TIMEOUT_MS,
        automatic_backend=IngestBackend.MOCK if cfg.automatic_ingest_uses_mock else IngestBackend.EXTERNAL,
        manual_backend=IngestBackend.MOCK if cfg.manual_ingest_uses_mock else IngestBackend.EXTERNAL,
        chunk_size=cfg.CHUNK_SIZE,
    )
