"""Processing backends behind one fire-and-forget contract.

Every processor schedules its work on the running asyncio loop and returns
immediately. The completion callback is invoked exactly once, after a minimum
delay and no later than ``timeout_ms`` after dispatch, with COMPLETED or
FAILED. Each processor enforces its own deadline; callers never race it.
"""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx

from docqa.domain.exceptions import ProcessingFailure
from docqa.domain.statuses import IngestionStatus

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[IngestionStatus, str | None], None]

# Fraction of the timeout a successful mock run takes.
MOCK_MIN_LATENCY_FRACTION = 0.1
MOCK_MAX_LATENCY_FRACTION = 0.5


class IngestBackend(str, Enum):
    MOCK = "mock"
    EXTERNAL = "external"


@runtime_checkable
class Processor(Protocol):
    """Anything that can process a document asynchronously and report back once."""

    def process_with_timeout(
        self,
        job_id: str,
        document_id: str,
        timeout_ms: int,
        on_complete: CompletionCallback,
    ) -> None:
        ...


class OutcomeSource(Protocol):
    """The subset of ``random.Random`` the mock processor draws from."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...


def timeout_message(timeout_ms: int) -> str:
    return f"Ingestion timed out after {timeout_ms}ms"


def deliver_outcome(
    job_id: str,
    on_complete: CompletionCallback,
    status: IngestionStatus,
    error_message: str | None = None,
) -> None:
    """Invoke the callback once; only if that call itself raises, report FAILED instead."""
    try:
        on_complete(status, error_message)
    except Exception as exc:
        logger.exception("Completion callback raised for job %s", job_id)
        try:
            on_complete(IngestionStatus.FAILED, f"System error: {exc}")
        except Exception:
            logger.exception("Corrective completion callback also raised for job %s", job_id)


def _validate_timeout(timeout_ms: int) -> None:
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be positive")


class _BackgroundTasks:
    """Keeps strong references to scheduled tasks until they finish."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def _schedule(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled task, including ones scheduled while waiting."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class MockProcessor(_BackgroundTasks):
    """Simulated processing with randomized latency and outcome.

    Success fires COMPLETED after ``uniform(0.1, 0.5) * timeout_ms``. Failure is
    modeled as a timeout: FAILED fires once the full ``timeout_ms`` has passed.
    """

    def __init__(self, success_rate: float = 0.85, rng: OutcomeSource | None = None) -> None:
        super().__init__()
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self._success_rate = success_rate
        self._rng = rng or random.Random()

    def process_with_timeout(
        self,
        job_id: str,
        document_id: str,
        timeout_ms: int,
        on_complete: CompletionCallback,
    ) -> None:
        _validate_timeout(timeout_ms)
        asyncio.get_running_loop()  # fail fast before drawing an outcome

        logger.info(
            "Mock ingestion started for job %s, document %s with %dms timeout",
            job_id, document_id, timeout_ms,
        )
        processing_ms = self._rng.uniform(
            MOCK_MIN_LATENCY_FRACTION * timeout_ms, MOCK_MAX_LATENCY_FRACTION * timeout_ms,
        )
        if self._rng.random() < self._success_rate:
            logger.info("Mock ingestion for job %s will complete in %.0fms", job_id, processing_ms)
            self._schedule(
                self._complete_after(job_id, processing_ms, on_complete),
                name=f"mock-ingest-{job_id}",
            )
        else:
            logger.info("Mock ingestion for job %s will time out after %dms", job_id, timeout_ms)
            self._schedule(
                self._time_out_after(job_id, timeout_ms, on_complete),
                name=f"mock-ingest-{job_id}",
            )

    async def _complete_after(
        self, job_id: str, delay_ms: float, on_complete: CompletionCallback,
    ) -> None:
        await asyncio.sleep(delay_ms / 1000)
        deliver_outcome(job_id, on_complete, IngestionStatus.COMPLETED)

    async def _time_out_after(
        self, job_id: str, timeout_ms: int, on_complete: CompletionCallback,
    ) -> None:
        await asyncio.sleep(timeout_ms / 1000)
        logger.info("Mock ingestion timed out for job %s after %dms", job_id, timeout_ms)
        deliver_outcome(job_id, on_complete, IngestionStatus.FAILED, timeout_message(timeout_ms))


def parse_service_reply(payload: Any) -> tuple[IngestionStatus, str | None]:
    """Map the remote service's JSON reply onto a terminal outcome."""
    if not isinstance(payload, dict):
        raise ProcessingFailure("malformed reply from ingestion service")
    raw_status = str(payload.get("status", "")).upper()
    try:
        status = IngestionStatus(raw_status)
    except ValueError:
        raise ProcessingFailure(f"unexpected status {raw_status!r} from ingestion service") from None
    if not status.is_terminal:
        raise ProcessingFailure(f"non-terminal status {raw_status!r} from ingestion service")
    error_message = payload.get("errorMessage") or payload.get("error_message")
    if status is IngestionStatus.FAILED and not error_message:
        error_message = "Ingestion service reported failure"
    return status, error_message


class ExternalProcessor(_BackgroundTasks):
    """Calls a remote ingestion service; without one configured, delegates to *fallback*."""

    def __init__(
        self,
        fallback: Processor,
        service_url: str | None = None,
        client_factory: Callable[..., httpx.AsyncClient] = httpx.AsyncClient,
    ) -> None:
        super().__init__()
        self._fallback = fallback
        self._service_url = service_url
        self._client_factory = client_factory

    def process_with_timeout(
        self,
        job_id: str,
        document_id: str,
        timeout_ms: int,
        on_complete: CompletionCallback,
    ) -> None:
        _validate_timeout(timeout_ms)
        if not self._service_url:
            logger.info(
                "No external ingestion service configured; job %s, document %s falls back to mock (%dms timeout)",
                job_id, document_id, timeout_ms,
            )
            self._fallback.process_with_timeout(job_id, document_id, timeout_ms, on_complete)
            return

        asyncio.get_running_loop()
        logger.info(
            "Calling external ingestion service for job %s, document %s with %dms timeout",
            job_id, document_id, timeout_ms,
        )
        self._schedule(
            self._call_service(job_id, document_id, timeout_ms, on_complete),
            name=f"external-ingest-{job_id}",
        )

    async def _call_service(
        self, job_id: str, document_id: str, timeout_ms: int, on_complete: CompletionCallback,
    ) -> None:
        timeout_s = timeout_ms / 1000
        try:
            status, error_message = await asyncio.wait_for(
                self._post(job_id, document_id, timeout_ms), timeout=timeout_s,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            status, error_message = IngestionStatus.FAILED, timeout_message(timeout_ms)
        except ProcessingFailure as exc:
            status, error_message = IngestionStatus.FAILED, f"External ingestion failed: {exc.message}"
        except httpx.HTTPError as exc:
            status, error_message = IngestionStatus.FAILED, f"External ingestion failed: {exc}"
        except Exception as exc:
            logger.exception("Unexpected error calling ingestion service for job %s", job_id)
            status, error_message = IngestionStatus.FAILED, f"External ingestion failed: {exc}"
        deliver_outcome(job_id, on_complete, status, error_message)

    async def _post(
        self, job_id: str, document_id: str, timeout_ms: int,
    ) -> tuple[IngestionStatus, str | None]:
        async with self._client_factory(timeout=timeout_ms / 1000) as client:
            resp = await client.post(
                self._service_url,
                json={"jobId": job_id, "documentId": document_id, "timeoutMs": timeout_ms},
            )
            resp.raise_for_status()
            try:
                payload = resp.json()
            except ValueError:
                raise ProcessingFailure("ingestion service returned invalid JSON") from None
        return parse_service_reply(payload)
