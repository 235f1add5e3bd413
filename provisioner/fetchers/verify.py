"""Post-attempt verification and partial-output cleanup."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from .exceptions import IntegrityFailure


def verify_download(path: Path, min_size: int, strategy: str) -> int:
    """Return the size of *path* if it looks like a real artifact.

    A zero exit status or HTTP 200 is not enough: CDNs happily serve small
    HTML error pages with a success status.
    """
    path = Path(path)
    if not path.is_file():
        raise IntegrityFailure(f"No file produced at {path}", strategy=strategy)

    size = path.stat().st_size
    if size <= min_size:
        raise IntegrityFailure(
            f"{path} is only {size} bytes (minimum {min_size})",
            strategy=strategy,
        )
    return size


def discard_partial(path: Path) -> None:
    """Remove whatever a previous attempt left at *path*. Safe to repeat."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        logger.debug(f"Removing leftover directory {path}")
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        logger.debug(f"Removing partial file {path}")
        path.unlink()
