"""
Date archives: posts grouped by year and month, newest first.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import groupby
from typing import Dict, Iterable, List, Tuple

from .documents import Document, POST


@dataclass
class ArchiveMonth:
    year: int
    month: int
    posts: List[Document] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]


def collect_archives(documents: Iterable[Document]) -> List[ArchiveMonth]:
    """Group posts by (year, month).

    Pages are ignored. Months are sorted newest first, and so are the posts
    within a month.
    """
    grouped: Dict[Tuple[int, int], List[Document]] = defaultdict(list)
    for doc in documents:
        if doc.kind == POST:
            grouped[(doc.date.year, doc.date.month)].append(doc)

    months = []
    for (year, month) in sorted(grouped, reverse=True):
        posts = sorted(grouped[(year, month)], key=lambda doc: (doc.date, doc.slug), reverse=True)
        months.append(ArchiveMonth(year=year, month=month, posts=posts))
    return months


def years(months: List[ArchiveMonth]) -> List[Tuple[int, List[ArchiveMonth]]]:
    """Tiered view of the archive: each year with its months."""
    return [(year, list(group)) for year, group in groupby(months, key=lambda m: m.year)]
