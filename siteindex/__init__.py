"""
Site index module for the tutorial site content.

This module provides functionality for:
- Parsing front-matter from markdown documents
- Grouping documents into ordered series with previous/next navigation
- Building date archives
- Writing the data files read by the site templates
- Checking content integrity (series order, images, internal links)

File structure:
    content/
        _posts/             - Dated posts (YYYY-MM-DD-slug.md)
        posts/<slug>/       - Post bundles (index.md plus images)
        series/             - Series landing pages (seriesIndexId)
        _data/              - Generated data files

Front-matter format:
    ---
    layout: post
    title: "Partial application"
    description: "Making functions easier to use with currying"
    nav: thinking-functionally
    seriesId: "Thinking functionally"
    seriesOrder: 6
    categories: [Currying, Partial Application]
    ---

Usage:
    from siteindex import SiteDataBuilder, load_documents, collect_series, lint_site

    # Build data files
    builder = SiteDataBuilder(Path("content"))
    stats = builder.build()

    # Navigate a series
    site = load_documents(Path("content"))
    series = collect_series(site.documents)
    nav = navigation_for(site.get("partial-application"), series)

    # Check the content
    report = lint_site(site)
"""

from .archives import ArchiveMonth, collect_archives, years
from .builder import SiteDataBuilder, build_site_data
from .config import SiteConfig
from .documents import Document, Site, load_document, load_documents
from .front_matter import FrontMatterError, parse_front_matter
from .linter import LintIssue, LintReport, lint_site
from .series import (
    Navigation,
    Series,
    SeriesOrderError,
    collect_series,
    first_pages,
    navigation_for,
    series_filename,
    series_index,
    validate_series,
)

__all__ = [
    "ArchiveMonth",
    "collect_archives",
    "years",
    "SiteDataBuilder",
    "build_site_data",
    "SiteConfig",
    "Document",
    "Site",
    "load_document",
    "load_documents",
    "FrontMatterError",
    "parse_front_matter",
    "LintIssue",
    "LintReport",
    "lint_site",
    "Navigation",
    "Series",
    "SeriesOrderError",
    "collect_series",
    "first_pages",
    "navigation_for",
    "series_filename",
    "series_index",
    "validate_series",
]

__version__ = "1.0.0"
