"""Atomic file writes for rendered output and cached payloads."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path


def ensure_dir(path: Path) -> None:
    """Create a directory and its parents; safe when another writer races us."""
    path.mkdir(parents=True, exist_ok=True)


def atomic_write_bytes(path: Path, data: bytes, mode: int = 0o644) -> None:
    """Write bytes through a sibling temp file, then move it into place.

    Readers see either the previous file or the complete new one, never a
    partial write. The temp file is removed if anything fails.

    Args:
        path: Destination file path
        data: Content to write
        mode: File permissions (octal)
    """
    ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            with contextlib.suppress(OSError):
                os.remove(tmp_name)


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write UTF-8 text atomically. See :func:`atomic_write_bytes`."""
    atomic_write_bytes(path, text.encode("utf-8"), mode=mode)
