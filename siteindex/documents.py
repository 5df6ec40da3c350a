"""
Document loader for the site content.

Rules:
1. A file under a posts directory (_posts/ or posts/) is a post, anything else is a page
2. Posts are named YYYY-MM-DD-slug.md or live in a bundle posts/<slug>/index.md
3. Front-matter values win over values derived from the path
4. Documents are immutable once loaded
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .config import SiteConfig
from .front_matter import (
    get_bool,
    get_date,
    get_int,
    get_list,
    get_str,
    parse_front_matter,
)

logger = logging.getLogger(__name__)

DATED_NAME_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")

POST = "post"
PAGE = "page"


@dataclass(frozen=True)
class Document:
    """Represents a single authored content file."""
    slug: str
    kind: str
    path: Path
    date: datetime
    layout: str = ""
    title: str = ""
    description: str = ""
    nav: str = ""
    series_id: str = ""
    series_order: int = 0
    categories: Tuple[str, ...] = ()
    series_index_id: str = ""
    series_index_order: int = 0
    permalink: str = ""
    image: str = ""
    draft: bool = False
    body_start: int = 1
    body: str = field(default="", repr=False, compare=False)
    metadata: Dict = field(default_factory=dict, repr=False, compare=False, hash=False)

    @property
    def is_post(self) -> bool:
        return self.kind == POST

    @property
    def in_series(self) -> bool:
        return bool(self.series_id)

    def summary(self) -> Dict:
        """Front-matter view used by data files and the preview API."""
        return {
            "slug": self.slug,
            "kind": self.kind,
            "url": self.permalink,
            "date": self.date.strftime("%Y-%m-%d"),
            "layout": self.layout,
            "title": self.title,
            "description": self.description,
            "nav": self.nav,
            "seriesId": self.series_id,
            "seriesOrder": self.series_order,
            "categories": list(self.categories),
        }


def _is_post_path(relative: Path, config: SiteConfig) -> bool:
    return any(part in config.posts_dirs for part in relative.parts[:-1])


def _slug_and_date(path: Path) -> Tuple[str, Optional[datetime]]:
    """Derive slug (and the date prefix, if any) from the file location."""
    stem = path.stem
    if stem == "index":
        stem = path.parent.name

    match = DATED_NAME_PATTERN.match(stem)
    if match:
        year, month, day, slug = match.groups()
        try:
            return slug, datetime(int(year), int(month), int(day))
        except ValueError:
            logger.warning(f"Invalid date prefix in {path.name}")
            return slug, None

    return stem, None


def construct_permalink(slug: str, relative: Path, kind: str) -> str:
    """Build the URL a document is published at when it declares none.

    Example:
        >>> construct_permalink("tuples", Path("_posts/2012-06-01-tuples.md"), POST)
        '/posts/tuples/'
        >>> construct_permalink("about", Path("about/index.md"), PAGE)
        '/about/'
        >>> construct_permalink("handling-state", Path("series/handling-state.md"), PAGE)
        '/series/handling-state.html'
    """
    if kind == POST:
        return f"/posts/{slug}/"

    local = "/" + relative.as_posix()
    if local.endswith("/index.md"):
        return local[: -len("index.md")]
    if local.endswith(".md"):
        return local[: -len(".md")] + ".html"
    return local


def load_document(path: Path, root: Path, config: SiteConfig) -> Optional[Document]:
    """Load a single markdown file.

    Args:
        path: Markdown file
        root: Content root (permalinks are relative to it)
        config: Site configuration

    Returns:
        Document, or None if the file has no front-matter

    Raises:
        FrontMatterError: If the front-matter is invalid
    """
    path = Path(path)
    relative = path.relative_to(root)
    source = relative.as_posix()

    text = path.read_text(encoding="utf-8")
    metadata, body = parse_front_matter(text, source)
    if metadata is None:
        logger.debug(f"Skipping {source}: no front-matter")
        return None

    kind = POST if _is_post_path(relative, config) else PAGE
    slug, name_date = _slug_and_date(path)
    slug = get_str(metadata, "slug", slug)

    doc_date = get_date(metadata, "date", source) or name_date
    if doc_date is None:
        if kind == POST:
            logger.warning(f"Post {source} has no date in its name or front-matter")
        doc_date = datetime.fromtimestamp(path.stat().st_mtime).replace(microsecond=0)

    return Document(
        slug=slug,
        kind=kind,
        path=path,
        date=doc_date,
        layout=get_str(metadata, "layout"),
        title=get_str(metadata, "title"),
        description=get_str(metadata, "description"),
        nav=get_str(metadata, "nav"),
        series_id=get_str(metadata, "seriesId"),
        series_order=get_int(metadata, "seriesOrder", 0, source),
        categories=tuple(get_list(metadata, "categories")),
        series_index_id=get_str(metadata, "seriesIndexId"),
        series_index_order=get_int(metadata, "seriesIndexOrder", 0, source),
        permalink=get_str(metadata, "permalink") or construct_permalink(slug, relative, kind),
        image=get_str(metadata, "image"),
        draft=get_bool(metadata, "draft"),
        body_start=text.count("\n") - body.count("\n") + 1,
        body=body,
        metadata=metadata,
    )


def iter_markdown_files(root: Path, config: SiteConfig) -> Iterator[Path]:
    """Yield markdown files under root in a stable order.

    Hidden and underscore-prefixed directories are skipped, except for the
    posts directories.
    """
    for path in sorted(Path(root).rglob("*.md")):
        relative = path.relative_to(root)
        skip = False
        for part in relative.parts[:-1]:
            if part in config.posts_dirs:
                continue
            if part == config.data_dir_name or part.startswith((".", "_")):
                skip = True
                break
        if not skip:
            yield path


@dataclass
class Site:
    """All loaded documents with lookups."""
    root: Path
    documents: List[Document]
    drafts_skipped: int = 0

    @property
    def posts(self) -> List[Document]:
        return [doc for doc in self.documents if doc.kind == POST]

    @property
    def pages(self) -> List[Document]:
        return [doc for doc in self.documents if doc.kind == PAGE]

    def get(self, slug: str) -> Optional[Document]:
        for doc in self.documents:
            if doc.slug == slug:
                return doc
        return None

    def by_permalink(self) -> Dict[str, Document]:
        return {normalize_url(doc.permalink): doc for doc in self.documents}

    def duplicate_slugs(self) -> Dict[str, List[Document]]:
        grouped: Dict[str, List[Document]] = defaultdict(list)
        for doc in self.documents:
            grouped[doc.slug].append(doc)
        return {slug: docs for slug, docs in grouped.items() if len(docs) > 1}


def normalize_url(url: str) -> str:
    """Normalize an internal URL for comparison: drop query/fragment, force trailing slash on directories."""
    url = url.split("#", 1)[0].split("?", 1)[0]
    if not url:
        return url
    if not url.startswith("/"):
        url = "/" + url
    last = url.rsplit("/", 1)[-1]
    if last and "." not in last:
        url += "/"
    return url


def load_documents(root: Path, config: Optional[SiteConfig] = None) -> Site:
    """Load every document under the content root.

    Args:
        root: Content root directory
        config: Site configuration (defaults to environment settings)

    Returns:
        Site with documents in path order

    Raises:
        FileNotFoundError: If root does not exist
        FrontMatterError: If any document has invalid front-matter
    """
    root = Path(root)
    config = config or SiteConfig.from_env(root)

    if not root.exists():
        raise FileNotFoundError(f"Content directory not found: {root}")

    documents: List[Document] = []
    drafts = 0
    for path in iter_markdown_files(root, config):
        doc = load_document(path, root, config)
        if doc is None:
            continue
        if doc.draft and not config.include_drafts:
            logger.debug(f"Skipping draft {doc.slug}")
            drafts += 1
            continue
        documents.append(doc)

    logger.debug(f"Loaded {len(documents)} documents from {root} ({drafts} drafts skipped)")
    return Site(root=root, documents=documents, drafts_skipped=drafts)

