"""Keyword search over the documentation corpus."""

from __future__ import annotations

import re
from typing import List

from mermaiddocs.errors import CorpusUnavailableError
from mermaiddocs.index.store import CorpusStore
from mermaiddocs.models import (
    Document,
    FileMatches,
    LineSearchReport,
    SearchMode,
    SectionHit,
    SectionSearchReport,
)
from mermaiddocs.utils.text import contains, context_window, extract_sections, split_lines

MAX_LINE_RESULTS = 200
MAX_SECTION_RESULTS = 20
SECTIONS_PER_DOCUMENT = 3
SECTION_SEPARATOR = "\n\n---\n\n"

_CATEGORY_STRIP_RE = re.compile(r"[-_ ]")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def normalize_category(value: str) -> str:
    """Fold a category or document id for substring comparison."""
    folded = value.lower()
    if folded.endswith(".md"):
        folded = folded[: -len(".md")]
    return _CATEGORY_STRIP_RE.sub("", folded)


def count_matching_lines(text: str, term: str, *, case_sensitive: bool = False) -> int:
    return sum(
        1 for line in split_lines(text) if line and contains(line, term, case_sensitive=case_sensitive)
    )


class SearchEngine:
    """High-level API to query the corpus store."""

    def __init__(self, store: CorpusStore) -> None:
        self.store = store

    def _documents(self) -> List[Document]:
        documents = self.store.all()
        if not documents:
            raise CorpusUnavailableError(self.store.docs_dir)
        return documents

    def search_lines(
        self,
        term: str,
        *,
        case_sensitive: bool = False,
        max_results: int = 50,
        context_lines: int = 3,
    ) -> LineSearchReport:
        """Return every matching line with its context, per document."""
        max_hits = clamp(max_results, 1, MAX_LINE_RESULTS)
        report = LineSearchReport(query=term)

        for document in self._documents():
            lines = split_lines(document.text)
            file_matches = FileMatches(file=document.id)
            for index, line in enumerate(lines):
                if len(file_matches.matches) >= max_hits:
                    break
                if line and contains(line, term, case_sensitive=case_sensitive):
                    file_matches.matches.append(context_window(lines, index, context_lines))
            if file_matches.matches:
                report.results.append(file_matches)
        return report

    def search_sections(
        self,
        term: str,
        *,
        category: str | None = None,
        mode: SearchMode = SearchMode.SNIPPET,
        case_sensitive: bool = False,
        max_results: int = 5,
    ) -> SectionSearchReport:
        """Return whole documents or their matching sections, in corpus order."""
        max_docs = clamp(max_results, 1, MAX_SECTION_RESULTS)
        report = SectionSearchReport(query=term, mode=mode, category=category)

        documents = self._documents()
        if category:
            wanted = normalize_category(category)
            documents = [doc for doc in documents if wanted in normalize_category(doc.id)]

        for document in documents:
            if len(report.results) >= max_docs:
                break
            if not contains(document.text, term, case_sensitive=case_sensitive):
                continue
            if mode is SearchMode.FULL:
                content = document.text
            else:
                sections = extract_sections(document.text, term, case_sensitive=case_sensitive)
                content = SECTION_SEPARATOR.join(
                    section.text for section in sections[:SECTIONS_PER_DOCUMENT]
                )
            report.results.append(
                SectionHit(
                    file=document.id,
                    match_count=count_matching_lines(
                        document.text, term, case_sensitive=case_sensitive
                    ),
                    mode=mode,
                    content=content,
                )
            )
        return report
