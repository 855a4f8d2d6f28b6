"""Tests for the mock and external processors.

Each scenario runs on a fresh event loop via asyncio.run; ``drain()`` waits
for every scheduled completion so assertions see the final callback log.
"""
import asyncio
import time

import httpx
import pytest

from docqa.domain.statuses import IngestionStatus
from docqa.ingest.processors import (
    ExternalProcessor,
    MockProcessor,
    Processor,
    deliver_outcome,
    parse_service_reply,
    timeout_message,
)
from docqa.domain.exceptions import ProcessingFailure

TIMEOUT_MS = 100


class _FixedRng:
    """Deterministic stand-in for random.Random."""

    def __init__(self, roll: float, fraction: float = 0.3) -> None:
        self._roll = roll
        self._fraction = fraction

    def random(self) -> float:
        return self._roll

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self._fraction


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[IngestionStatus, str | None, float]] = []
        self._t0 = time.monotonic()

    def __call__(self, status, error_message=None) -> None:
        self.calls.append((status, error_message, (time.monotonic() - self._t0) * 1000))


def _run(processor, timeout_ms=TIMEOUT_MS, on_complete=None):
    recorder = on_complete or _Recorder()

    async def scenario():
        processor.process_with_timeout("job-1", "doc-1", timeout_ms, recorder)
        await processor.drain()

    asyncio.run(scenario())
    return recorder


# ---------------------------------------------------------------------------
# MockProcessor
# ---------------------------------------------------------------------------


def test_mock_processor_satisfies_protocol():
    assert isinstance(MockProcessor(), Processor)


def test_mock_success_completes_once_before_timeout():
    rec = _run(MockProcessor(success_rate=0.85, rng=_FixedRng(roll=0.1)))
    assert len(rec.calls) == 1
    status, error, elapsed_ms = rec.calls[0]
    assert status is IngestionStatus.COMPLETED
    assert error is None
    assert elapsed_ms < TIMEOUT_MS


def test_mock_failure_reports_timeout_after_full_deadline():
    rec = _run(MockProcessor(success_rate=0.85, rng=_FixedRng(roll=0.9)))
    assert len(rec.calls) == 1
    status, error, elapsed_ms = rec.calls[0]
    assert status is IngestionStatus.FAILED
    assert error == f"Ingestion timed out after {TIMEOUT_MS}ms"
    assert elapsed_ms >= TIMEOUT_MS * 0.9


def test_mock_success_rate_bounds():
    assert _run(MockProcessor(success_rate=1.0, rng=_FixedRng(roll=0.999))).calls[0][0] is IngestionStatus.COMPLETED
    assert _run(MockProcessor(success_rate=0.0, rng=_FixedRng(roll=0.0))).calls[0][0] is IngestionStatus.FAILED


def test_mock_rejects_invalid_arguments():
    with pytest.raises(ValueError):
        MockProcessor(success_rate=1.5)
    with pytest.raises(ValueError):
        MockProcessor().process_with_timeout("j", "d", 0, lambda *_: None)


def test_mock_requires_running_loop():
    with pytest.raises(RuntimeError):
        MockProcessor().process_with_timeout("j", "d", TIMEOUT_MS, lambda *_: None)


def test_raising_callback_gets_one_corrective_failure():
    calls = []

    def on_complete(status, error_message=None):
        calls.append((status, error_message))
        if status is IngestionStatus.COMPLETED:
            raise RuntimeError("db down")

    _run(MockProcessor(success_rate=1.0, rng=_FixedRng(roll=0.0)), on_complete=on_complete)
    assert calls == [
        (IngestionStatus.COMPLETED, None),
        (IngestionStatus.FAILED, "System error: db down"),
    ]


def test_deliver_outcome_swallows_failing_corrective_call():
    calls = []

    def always_raises(status, error_message=None):
        calls.append(status)
        raise RuntimeError("still down")

    deliver_outcome("job-1", always_raises, IngestionStatus.COMPLETED)
    assert calls == [IngestionStatus.COMPLETED, IngestionStatus.FAILED]


# ---------------------------------------------------------------------------
# ExternalProcessor
# ---------------------------------------------------------------------------


def _client_factory(handler):
    def factory(**kwargs):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)

    return factory


def test_external_without_url_falls_back_to_mock():
    mock = MockProcessor(success_rate=1.0, rng=_FixedRng(roll=0.0))
    external = ExternalProcessor(fallback=mock, service_url=None)

    rec = _Recorder()

    async def scenario():
        external.process_with_timeout("job-1", "doc-1", TIMEOUT_MS, rec)
        assert external.pending == 0
        assert mock.pending == 1
        await mock.drain()

    asyncio.run(scenario())
    assert [c[0] for c in rec.calls] == [IngestionStatus.COMPLETED]


def test_external_success_posts_job_and_completes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        return httpx.Response(200, json={"status": "COMPLETED"})

    external = ExternalProcessor(
        fallback=MockProcessor(), service_url="http://ingest.test/jobs",
        client_factory=_client_factory(handler),
    )
    rec = _run(external)
    assert [(c[0], c[1]) for c in rec.calls] == [(IngestionStatus.COMPLETED, None)]
    assert b'"jobId":"job-1"' in seen["body"].replace(b" ", b"")


def test_external_reported_failure_keeps_service_message():
    def handler(request):
        return httpx.Response(200, json={"status": "FAILED", "errorMessage": "unsupported format"})

    external = ExternalProcessor(
        fallback=MockProcessor(), service_url="http://ingest.test/jobs",
        client_factory=_client_factory(handler),
    )
    rec = _run(external)
    assert [(c[0], c[1]) for c in rec.calls] == [(IngestionStatus.FAILED, "unsupported format")]


def test_external_http_error_fails_once():
    def handler(request):
        return httpx.Response(503, json={"detail": "unavailable"})

    external = ExternalProcessor(
        fallback=MockProcessor(), service_url="http://ingest.test/jobs",
        client_factory=_client_factory(handler),
    )
    rec = _run(external)
    assert len(rec.calls) == 1
    assert rec.calls[0][0] is IngestionStatus.FAILED
    assert rec.calls[0][1].startswith("External ingestion failed:")


def test_external_slow_service_times_out():
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"status": "COMPLETED"})

    external = ExternalProcessor(
        fallback=MockProcessor(), service_url="http://ingest.test/jobs",
        client_factory=_client_factory(handler),
    )
    rec = _run(external, timeout_ms=50)
    assert [(c[0], c[1]) for c in rec.calls] == [(IngestionStatus.FAILED, timeout_message(50))]
    assert rec.calls[0][2] < 1000


@pytest.mark.parametrize("payload", [[], {"status": "PROCESSING"}, {"status": "bogus"}])
def test_parse_service_reply_rejects_non_terminal_or_malformed(payload):
    with pytest.raises(ProcessingFailure):
        parse_service_reply(payload)


def test_parse_service_reply_defaults_failure_message():
    assert parse_service_reply({"status": "failed"}) == (
        IngestionStatus.FAILED, "Ingestion service reported failure",
    )


def test_drain_waits_for_every_pending_completion():
    processor = MockProcessor(success_rate=1.0, rng=_FixedRng(roll=0.0))
    rec = _Recorder()

    async def scenario():
        for i in range(3):
            processor.process_with_timeout(f"job-{i}", "doc-1", TIMEOUT_MS, rec)
        assert processor.pending == 3
        await processor.drain()
        assert processor.pending == 0

    asyncio.run(scenario())
    assert len(rec.calls) == 3
