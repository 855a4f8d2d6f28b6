"""Upload storage on local disk."""
from __future__ import annotations
import re
import uuid
from pathlib import Path

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str) -> str:
    """Reduce *name* to a safe basename; never empty."""
    base = Path(name).name.strip()
    safe = _UNSAFE.sub("_", base).strip("._")
    return safe or "upload"


def save_upload(upload_dir: Path, content: bytes, original_filename: str) -> tuple[str, Path]:
    """Write bytes under a unique name; return (stored filename, absolute path)."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    stored = f"{uuid.uuid4().hex}_{sanitize_filename(original_filename)}"
    path = upload_dir / stored
    path.write_bytes(content)
    return stored, path.resolve()
