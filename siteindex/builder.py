"""
Site data builder.

Builds the data files the site templates read:
- series.yaml       - every series with its ordered posts and prev/next links
- seriesIndex.yaml  - the series landing pages, in seriesIndexOrder
- archives.yaml     - posts grouped by year and month
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .archives import ArchiveMonth, collect_archives
from .config import SiteConfig
from .documents import Document, load_documents
from .series import Series, collect_series, series_index, validate_series

logger = logging.getLogger(__name__)

DATA_FILES = ("series", "seriesIndex", "archives")


class SiteDataBuilder:
    """Builds and reads back the site data files."""

    def __init__(self, content_dir: Path, config: Optional[SiteConfig] = None):
        """Initialize the builder.

        Args:
            content_dir: Root of the markdown content
            config: Site configuration (defaults to environment settings)
        """
        self.content_dir = Path(content_dir)
        self.config = config or SiteConfig.from_env(self.content_dir)
        self.data_dir = self.content_dir / self.config.data_dir_name

    def build(self, strict: bool = True, clean_existing: bool = False) -> Dict:
        """Load the content and write all data files.

        Args:
            strict: Refuse to write when a series reuses an order value
            clean_existing: Remove previously generated files first

        Returns:
            Dictionary with build statistics

        Raises:
            FileNotFoundError: If the content directory does not exist
            FrontMatterError: If a document has invalid front-matter
            SeriesOrderError: In strict mode, if series orders are duplicated

        Example:
            >>> builder = SiteDataBuilder(Path("content"))
            >>> stats = builder.build()
            >>> print(f"Indexed {stats['series_count']} series")
        """
        if clean_existing:
            self.clean()

        site = load_documents(self.content_dir, self.config)
        series = collect_series(site.documents, self.config.series_dir)

        if strict:
            validate_series(series)

        self.data_dir.mkdir(parents=True, exist_ok=True)

        files = [
            self._write("series", self.series_data(series)),
            self._write("seriesIndex", self.series_index_data(site.documents)),
            self._write("archives", self.archives_data(collect_archives(site.posts))),
        ]

        stats = {
            "documents_count": len(site.documents),
            "posts_count": len(site.posts),
            "pages_count": len(site.pages),
            "series_count": len(series),
            "drafts_skipped": site.drafts_skipped,
            "by_layout": self._count_by_field(site.documents, "layout"),
            "data_dir": str(self.data_dir),
            "files": [str(path) for path in files],
            "timestamp": datetime.now().isoformat(),
        }

        logger.info(f"Wrote {len(files)} data files to {self.data_dir}")
        return stats

    def series_data(self, series: Dict[str, Series]) -> Dict:
        """Build the series data: seriesId -> title, permalink and ordered posts."""
        data = {}
        for series_id, entry in series.items():
            posts = []
            for doc in entry.documents:
                record = {
                    "slug": doc.slug,
                    "seriesOrder": doc.series_order,
                    "url": doc.permalink,
                    "title": doc.title,
                    "description": doc.description,
                }

                prev_doc = entry.previous(doc)
                if prev_doc is not None:
                    record["prevUrl"] = prev_doc.permalink
                    record["prevTitle"] = prev_doc.title
                    record["prevOrder"] = prev_doc.series_order

                next_doc = entry.next(doc)
                if next_doc is not None:
                    record["nextUrl"] = next_doc.permalink
                    record["nextTitle"] = next_doc.title
                    record["nextOrder"] = next_doc.series_order

                posts.append(record)

            data[series_id] = {
                "title": entry.title,
                "permalink": entry.permalink,
                "posts": posts,
            }
        return data

    def series_index_data(self, documents: List[Document]) -> List[Dict]:
        return [
            {"title": page.series_index_id, "permalink": page.permalink}
            for page in series_index(documents)
        ]

    def archives_data(self, months: List[ArchiveMonth]) -> List[Dict]:
        data = []
        for month in months:
            data.append({
                "year": month.year,
                "month": month.month,
                "monthName": month.month_name,
                "posts": [
                    {
                        "slug": post.slug,
                        "url": post.permalink,
                        "title": post.title,
                        "date": post.date.strftime("%d %b %Y"),
                        "description": post.description,
                    }
                    for post in month.posts
                ],
            })
        return data

    def _data_path(self, name: str) -> Path:
        return self.data_dir / f"{name}{self.config.data_ext}"

    def _write(self, name: str, data) -> Path:
        """Save one data file in the configured format.

        Args:
            name: Base file name (series, seriesIndex, archives)
            data: Serializable data
        """
        path = self._data_path(name)
        if self.config.data_format == "json":
            text = json.dumps(data, indent=2, ensure_ascii=False)
        else:
            text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
        path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote {path}")
        return path

    def load_data(self, name: str):
        """Read a generated data file back.

        Raises:
            FileNotFoundError: If the file has not been built yet
        """
        path = self._data_path(name)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}. Build data files first.")

        text = path.read_text(encoding="utf-8")
        if self.config.data_format == "json":
            return json.loads(text)
        return yaml.safe_load(text)

    def clean(self) -> None:
        """Remove previously generated data files."""
        for name in DATA_FILES:
            path = self._data_path(name)
            if path.exists():
                path.unlink()
                logger.debug(f"Removed {path}")

    def _count_by_field(self, documents: List[Document], field: str) -> Dict[str, int]:
        counts = {}
        for doc in documents:
            value = getattr(doc, field) or "(none)"
            counts[value] = counts.get(value, 0) + 1
        return counts


def build_site_data(content_dir: Path, config: Optional[SiteConfig] = None, strict: bool = True) -> Dict:
    return SiteDataBuilder(content_dir, config).build(strict=strict)

