"""Application logger.

``logger`` is the shared app-level logger used by routers and the CLI;
library modules use ``logging.getLogger(__name__)`` and inherit its handler
through the root configuration done in ``setup_logging``.
"""
from __future__ import annotations
import logging
import sys
import uuid

_RUN_ID = uuid.uuid4().hex[:12]
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("docqa")


def get_run_id() -> str:
    """Identifier of this process, stable for its lifetime."""
    return _RUN_ID


def setup_logging(level: str | int = "INFO") -> None:
    """Attach a stdout handler to the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    if not any(getattr(h, "_docqa", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._docqa = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)
