"""In-memory corpus of documentation files."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping

from mermaiddocs.models import Document
from mermaiddocs.utils.files import iter_markdown_paths

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadStats:
    loaded: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "loaded":
            self.loaded += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


class CorpusStore:
    """Loads the documentation directory once and serves it read-only."""

    def __init__(self, docs_dir: Path) -> None:
        self.docs_dir = Path(docs_dir)
        self._documents: Mapping[str, Document] = MappingProxyType({})
        self._stats: LoadStats | None = None
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._stats is not None

    def load(self) -> LoadStats:
        """Populate the corpus on first call; later calls return the first result."""
        if self._stats is not None:
            return self._stats
        with self._lock:
            if self._stats is None:
                staging, stats = self._read_all()
                self._documents = MappingProxyType(staging)
                self._stats = stats
                LOGGER.info(
                    "Loaded %d documentation files from %s (%d failed)",
                    stats.loaded,
                    self.docs_dir,
                    stats.failed,
                )
        return self._stats

    def _read_all(self) -> tuple[dict[str, Document], LoadStats]:
        staging: dict[str, Document] = {}
        stats = LoadStats()
        if not self.docs_dir.is_dir():
            LOGGER.error("Documentation directory not found: %s", self.docs_dir)
            return staging, stats

        try:
            paths = list(iter_markdown_paths(self.docs_dir))
        except OSError as exc:
            LOGGER.error("Failed to list documentation directory %s: %s", self.docs_dir, exc)
            return staging, stats

        for path in paths:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Failed to read %s: %s", path, exc)
                stats.increment("failed", path)
                continue
            staging[path.name] = Document(id=path.name, text=text)
            stats.increment("loaded", path)
        return staging, stats

    def get(self, doc_id: str) -> Document | None:
        self.load()
        return self._documents.get(doc_id)

    def all(self) -> List[Document]:
        self.load()
        return list(self._documents.values())

    def ids(self) -> List[str]:
        self.load()
        return list(self._documents)

    def __len__(self) -> int:
        self.load()
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        self.load()
        return doc_id in self._documents

    def __iter__(self) -> Iterator[Document]:
        return iter(self.all())
