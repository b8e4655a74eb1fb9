"""Utility helpers for working with files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

LOGGER = logging.getLogger(__name__)


def iter_markdown_paths(directory: Path) -> Iterator[Path]:
    """Yield markdown files directly under ``directory`` in name order."""
    for item in sorted(directory.iterdir()):
        if item.is_file() and item.suffix.lower() == ".md":
            yield item


def read_text_or(path: Path, placeholder: str) -> str:
    """Read a UTF-8 file, returning ``placeholder`` when it is missing or unreadable."""
    if not path.is_file():
        return placeholder
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Failed to read %s: %s", path, exc)
        return placeholder
