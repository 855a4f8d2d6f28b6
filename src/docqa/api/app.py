"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from docqa.config import settings
from docqa.domain.exceptions import (
    BadInputError,
    ConflictError,
    DocQAError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from docqa.logging import setup_logging
from docqa.services.ingestion_service import IngestionOrchestrator

_STATUS_CODES: dict[type[DocQAError], int] = {
    BadInputError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}


def create_app(ingestion: IngestionOrchestrator | None = None) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from docqa.infra.db.engine import engine  # triggers pragma + mapper registration
        from docqa.db import init_db
        init_db(engine)
        yield
        await app.state.ingestion.drain()

    app = FastAPI(
        title="DocQA API",
        version="0.1.0",
        lifespan=lifespan,
    )

    if ingestion is None:
        from docqa.container import build_ingestion_orchestrator
        ingestion = build_ingestion_orchestrator(settings)
    app.state.ingestion = ingestion

    # Import routers inside create_app() to avoid circular imports at module load time
    from docqa.api.routers.users import router as users_router
    from docqa.api.routers.documents import router as documents_router
    from docqa.api.routers.ingest import router as ingest_router
    from docqa.api.routers.qna import router as qna_router

    app.include_router(users_router)
    app.include_router(documents_router)
    app.include_router(ingest_router)
    app.include_router(qna_router)

    for exc_type, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_type, _json_error(status_code))

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app


def _json_error(status_code: int):
    def _handler(request: Request, exc: DocQAError) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    return _handler
