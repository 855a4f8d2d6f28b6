"""Engine singleton and schema bootstrap."""
from __future__ import annotations
from sqlmodel import SQLModel, create_engine
from docqa.config import settings


def _connect_args(url: str) -> dict:
    # Completion callbacks write from the event-loop thread while sync
    # endpoints read from the threadpool.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=_connect_args(settings.database_url),
)


def init_db(target_engine=None) -> None:
    """Create the data directory and all tables."""
    import docqa.models  # noqa: F401   # registers the ORM table mappers

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(target_engine or engine)
