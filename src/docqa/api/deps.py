"""FastAPI dependencies."""
from __future__ import annotations
from collections.abc import Callable
from typing import Generator
from fastapi import Depends, Header, Request
from docqa.domain.access import Requester, ensure_role
from docqa.domain.exceptions import UnauthorizedError
from docqa.domain.statuses import UserRole
from docqa.infra.db.uow import UnitOfWork
from docqa.services.ingestion_service import IngestionOrchestrator
from docqa.services.users_service import UsersService


def get_uow() -> Generator[UnitOfWork, None, None]:
    """Yield one UnitOfWork per request; commit/rollback in __exit__."""
    with UnitOfWork() as uow:
        yield uow


def get_ingestion(request: Request) -> IngestionOrchestrator:
    return request.app.state.ingestion


def get_requester(
    x_user_id: str | None = Header(default=None),
    uow: UnitOfWork = Depends(get_uow),
) -> Requester:
    """Resolve the caller from the X-User-Id header."""
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    return UsersService(uow).resolve_requester(x_user_id)


def require_roles(*roles: UserRole) -> Callable[..., Requester]:
    def _dependency(requester: Requester = Depends(get_requester)) -> Requester:
        ensure_role(requester, *roles)
        return requester

    return _dependency


require_admin = require_roles(UserRole.ADMIN)
require_editor = require_roles(UserRole.ADMIN, UserRole.EDITOR)
