"""Unit of Work: one session per logical operation.

Ingestion completion spans several writers (job, document status, chunks)
that must commit together; ``joined`` lets each of them run inside a
caller's unit of work when one is given and open their own otherwise.
"""
from __future__ import annotations
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from sqlalchemy.engine import Engine
from sqlmodel import Session
from docqa.infra.db.engine import engine


class UnitOfWork:
    """Context manager wrapping a single DB session.

    Commits on clean exit, rolls back on exception, always closes. *bind*
    overrides the module engine (resolved at enter time, so tests can patch it).
    """

    def __init__(self, bind: Engine | None = None) -> None:
        self._bind = bind
        self._session: Session | None = None

    def __enter__(self) -> "UnitOfWork":
        self._session = Session(self._bind or engine)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._session.commit()
            else:
                self._session.rollback()
        finally:
            self._session.close()
            self._session = None

    @property
    def active(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active; use it as a context manager.")
        return self._session

    def commit(self) -> None:
        """Explicit mid-operation commit (e.g. before ingestion reads the row from its own session)."""
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


@contextmanager
def joined(
    uow: UnitOfWork | None, factory: Callable[[], UnitOfWork] = UnitOfWork,
) -> Iterator[UnitOfWork]:
    """Yield *uow* untouched (its owner commits), or a fresh unit of work that commits on exit."""
    if uow is not None:
        if not uow.active:
            raise RuntimeError("Cannot join a UnitOfWork that is not active.")
        yield uow
        return
    with factory() as own:
        yield own
