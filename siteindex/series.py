"""
Series grouping and navigation.

A series is every document sharing the same seriesId, ordered by
seriesOrder. Order values must be unique within a series; they define the
previous/next traversal.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .documents import Document, PAGE

logger = logging.getLogger(__name__)


class SeriesOrderError(ValueError):
    """Exception raised when a series reuses an order value."""
    pass


def series_filename(name: str) -> str:
    """Turn a series name into a URL-safe directory name.

    Example:
        >>> series_filename("Why use F#?")
        'why-use-fsharp'
        >>> series_filename("C# to F# migration")
        'csharp-to-fsharp-migration'
    """
    text = name.lower().replace(" ", "-").replace("f#", "fsharp").replace("c#", "csharp")
    return re.sub(r"[^a-zA-Z0-9_.-]+", "", text)


@dataclass
class Series:
    """An ordered run of documents sharing a seriesId."""
    series_id: str
    documents: List[Document] = field(default_factory=list)
    index_page: Optional[Document] = None
    series_dir: str = "series"

    @property
    def title(self) -> str:
        return self.series_id

    @property
    def permalink(self) -> str:
        if self.index_page is not None:
            return self.index_page.permalink
        return f"/{self.series_dir}/{series_filename(self.series_id)}/"

    @property
    def first(self) -> Optional[Document]:
        return self.documents[0] if self.documents else None

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self):
        return iter(self.documents)

    def __contains__(self, doc: Document) -> bool:
        return doc in self.documents

    def position(self, doc: Document) -> Optional[int]:
        try:
            return self.documents.index(doc)
        except ValueError:
            return None

    def previous(self, doc: Document) -> Optional[Document]:
        pos = self.position(doc)
        if pos is not None and pos > 0:
            return self.documents[pos - 1]
        return None

    def next(self, doc: Document) -> Optional[Document]:
        pos = self.position(doc)
        if pos is not None and pos < len(self.documents) - 1:
            return self.documents[pos + 1]
        return None

    def duplicate_orders(self) -> Dict[int, List[Document]]:
        grouped: Dict[int, List[Document]] = defaultdict(list)
        for doc in self.documents:
            grouped[doc.series_order].append(doc)
        return {order: docs for order, docs in grouped.items() if len(docs) > 1}

    def gaps(self) -> List[int]:
        """Order values missing between the lowest and highest used."""
        orders = {doc.series_order for doc in self.documents}
        if not orders:
            return []
        return [order for order in range(min(orders), max(orders) + 1) if order not in orders]


@dataclass(frozen=True)
class Navigation:
    """Previous/next links of a document within its series."""
    series: Optional[Series]
    previous: Optional[Document] = None
    next: Optional[Document] = None


def _sort_key(doc: Document):
    return (doc.series_order, doc.slug)


def collect_series(documents: Iterable[Document], series_dir: str = "series") -> Dict[str, Series]:
    """Group documents into series.

    Args:
        documents: Posts and pages
        series_dir: URL prefix for series without an index page

    Returns:
        Mapping of seriesId to Series, sorted by seriesId, members sorted by seriesOrder

    Example:
        >>> series = collect_series(site.documents)
        >>> [d.slug for d in series["Thinking functionally"]]
        ['thinking-functionally-intro', 'mathematical-functions', ...]
    """
    documents = list(documents)
    grouped: Dict[str, List[Document]] = defaultdict(list)
    for doc in documents:
        if doc.series_id:
            grouped[doc.series_id].append(doc)

    index_pages: Dict[str, Document] = {}
    for doc in documents:
        if doc.kind == PAGE and doc.series_index_id and doc.series_index_id not in index_pages:
            index_pages[doc.series_index_id] = doc

    series: Dict[str, Series] = {}
    for series_id in sorted(grouped):
        members = sorted(grouped[series_id], key=_sort_key)
        series[series_id] = Series(
            series_id=series_id,
            documents=members,
            index_page=index_pages.get(series_id),
            series_dir=series_dir,
        )
        logger.debug(f"Series '{series_id}': {len(members)} documents")

    return series


def validate_series(series: Dict[str, Series]) -> None:
    """Ensure every seriesId+seriesOrder pair is unique.

    Raises:
        SeriesOrderError: Listing every duplicated pair
    """
    problems = []
    for series_id, entry in series.items():
        for order, docs in sorted(entry.duplicate_orders().items()):
            slugs = ", ".join(doc.slug for doc in docs)
            problems.append(f"'{series_id}' order {order}: {slugs}")

    if problems:
        raise SeriesOrderError("Duplicate series order: " + "; ".join(problems))


def first_pages(series: Dict[str, Series]) -> List[Document]:
    """First document of every series, sorted by seriesId."""
    return [series[series_id].first for series_id in sorted(series) if series[series_id].first]


def series_index(documents: Iterable[Document]) -> List[Document]:
    """Pages declaring a seriesIndexId, in seriesIndexOrder."""
    pages = [doc for doc in documents if doc.series_index_id and doc.kind == PAGE]
    return sorted(pages, key=lambda doc: (doc.series_index_order, doc.series_index_id))


def navigation_for(doc: Document, series: Dict[str, Series]) -> Navigation:
    entry = series.get(doc.series_id) if doc.series_id else None
    if entry is None:
        return Navigation(series=None)
    return Navigation(series=entry, previous=entry.previous(doc), next=entry.next(doc))
