"""
Content integrity checks.

Checks run over a loaded Site:
- every document has a title
- every seriesId+seriesOrder pair is unique, with no gaps
- every series has a landing page
- every markdown image and front-matter image exists on disk
- every internal link points at a known permalink or static file
- optionally, every external link answers with a non-error status
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

import requests

from .config import SiteConfig
from .documents import Document, Site, normalize_url
from .series import Series, collect_series

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"

IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\(\s*(?:<([^>]+)>|([^)\s]+))(?:\s+\"[^\"]*\")?\s*\)")
LINK_PATTERN = re.compile(r"(?<!!)\[[^\]]*\]\(\s*(?:<([^>]+)>|([^)\s]+))(?:\s+\"[^\"]*\")?\s*\)")
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
EXTERNAL_PREFIXES = ("http://", "https://", "data:", "mailto:", "//")

USER_AGENT = "Mozilla/5.0 (compatible; siteindex-linkcheck/1.0)"


@dataclass(frozen=True)
class LintIssue:
    severity: str
    code: str
    path: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}" if self.line else self.path
        return f"{self.severity.upper()} [{self.code}] {location}: {self.message}"


@dataclass
class LintReport:
    issues: List[LintIssue] = field(default_factory=list)

    def add(self, severity: str, code: str, doc: Document, message: str, line: Optional[int] = None) -> None:
        self.issues.append(LintIssue(severity, code, _display_path(doc), message, line))

    @property
    def errors(self) -> List[LintIssue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> List[LintIssue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def by_code(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for issue in self.issues:
            counts[issue.code] = counts.get(issue.code, 0) + 1
        return counts


def _display_path(doc: Document) -> str:
    return f"{doc.path.parent.name}/{doc.path.name}"


def iter_body_lines(body: str) -> Iterator[Tuple[int, str]]:
    """Yield (line number, line) for body lines outside fenced code blocks."""
    in_code_block = False
    for number, line in enumerate(body.splitlines(), start=1):
        if FENCE_PATTERN.match(line):
            in_code_block = not in_code_block
            continue
        if not in_code_block:
            yield number, line


def _target(match: re.Match) -> str:
    """Link target of a markdown link match, with or without angle brackets."""
    return (match.group(1) or match.group(2)).strip()


def is_external(target: str) -> bool:
    return target.startswith(EXTERNAL_PREFIXES)


def image_search_paths(doc: Document, src: str, content_dir: Path, static_dir: Optional[Path]) -> List[Path]:
    """Candidate locations of an image.

    Rooted sources are looked up in the static dir and then the content
    dir; relative sources are relative to the document.
    """
    src = src.split("#", 1)[0].split("?", 1)[0]
    if src.startswith("/"):
        stripped = src.lstrip("/")
        roots = [static_dir, content_dir] if static_dir else [content_dir]
        return [(root / stripped).resolve() for root in roots]
    return [(doc.path.parent / src).resolve()]


def check_titles(site: Site, report: LintReport) -> None:
    for doc in site.documents:
        if not doc.title:
            report.add(ERROR, "missing-title", doc, "document has no title")


def check_duplicate_slugs(site: Site, report: LintReport) -> None:
    for slug, docs in site.duplicate_slugs().items():
        others = ", ".join(_display_path(doc) for doc in docs[1:])
        report.add(ERROR, "duplicate-slug", docs[0], f"slug '{slug}' is also used by {others}")


def check_series(site: Site, series: Dict[str, Series], report: LintReport) -> None:
    for doc in site.documents:
        if not doc.series_id and doc.series_order:
            report.add(WARNING, "order-without-series", doc,
                       f"seriesOrder {doc.series_order} is set but seriesId is empty")

    for series_id, entry in series.items():
        for order, docs in sorted(entry.duplicate_orders().items()):
            slugs = ", ".join(doc.slug for doc in docs)
            for doc in docs:
                report.add(ERROR, "duplicate-series-order", doc,
                           f"series '{series_id}' uses order {order} more than once ({slugs})")

        gaps = entry.gaps()
        if gaps:
            report.add(WARNING, "series-order-gap", entry.documents[0],
                       f"series '{series_id}' is missing order value(s) {gaps}")

        if entry.index_page is None:
            report.add(WARNING, "series-without-index", entry.documents[0],
                       f"no page declares seriesIndexId '{series_id}'")


def check_images(site: Site, config: SiteConfig, report: LintReport) -> None:
    for doc in site.documents:
        for number, line in iter_body_lines(doc.body):
            for match in IMAGE_PATTERN.finditer(line):
                src = _target(match)
                if is_external(src):
                    continue
                candidates = image_search_paths(doc, src, site.root, config.static_dir)
                if not any(path.is_file() for path in candidates):
                    report.add(WARNING, "missing-image", doc, f"image '{src}' not found", doc.body_start + number - 1)

        if doc.image and not is_external(doc.image):
            candidates = image_search_paths(doc, doc.image, site.root, config.static_dir)
            if not any(path.is_file() for path in candidates):
                report.add(WARNING, "missing-front-matter-image", doc,
                           f"front-matter image '{doc.image}' not found")


def _known_targets(site: Site, series: Dict[str, Series]) -> Set[str]:
    targets = set(site.by_permalink())
    targets.update(normalize_url(entry.permalink) for entry in series.values())
    targets.add("/")
    return targets


def _static_file_exists(target: str, site: Site, config: SiteConfig) -> bool:
    stripped = target.split("#", 1)[0].split("?", 1)[0].lstrip("/")
    roots = [config.static_dir, site.root] if config.static_dir else [site.root]
    for root in roots:
        path = root / stripped
        if path.is_file() or (path / "index.html").is_file():
            return True
    return False


def check_internal_links(site: Site, series: Dict[str, Series], config: SiteConfig, report: LintReport) -> None:
    targets = _known_targets(site, series)
    for doc in site.documents:
        for number, line in iter_body_lines(doc.body):
            for match in LINK_PATTERN.finditer(line):
                target = _target(match)
                if not target.startswith("/") or is_external(target):
                    continue
                normalized = normalize_url(target)
                if normalized in targets or _static_file_exists(target, site, config):
                    continue
                report.add(WARNING, "broken-internal-link", doc, f"link '{target}' does not resolve", doc.body_start + number - 1)


def check_link(url: str, timeout: float = 10.0) -> Tuple[str, object]:
    """Request a URL and return (url, status code or error text)."""
    headers = {"User-Agent": USER_AGENT}
    try:
        # HEAD first for speed, GET for servers that refuse HEAD
        response = requests.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        if response.status_code >= 400:
            response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        return url, response.status_code
    except requests.RequestException as exc:
        return url, str(exc)


def check_external_links(site: Site, config: SiteConfig, report: LintReport) -> None:
    occurrences: Dict[str, List[Tuple[Document, int]]] = {}
    for doc in site.documents:
        for number, line in iter_body_lines(doc.body):
            for match in LINK_PATTERN.finditer(line):
                target = _target(match).rstrip(".,")
                if target.startswith(("http://", "https://")):
                    occurrences.setdefault(target, []).append((doc, number))

    if not occurrences:
        return

    logger.info(f"Checking {len(occurrences)} external links with {config.link_workers} workers")
    with ThreadPoolExecutor(max_workers=config.link_workers) as executor:
        results = list(executor.map(lambda url: check_link(url, config.link_timeout), occurrences))

    for url, status in results:
        if isinstance(status, int) and status < 400:
            continue
        for doc, number in occurrences[url]:
            report.add(WARNING, "broken-external-link", doc, f"link '{url}' returned {status}", doc.body_start + number - 1)


def lint_site(site: Site, config: Optional[SiteConfig] = None, check_external: bool = False) -> LintReport:
    """Run every content check over a loaded site.

    Args:
        site: Loaded documents
        config: Site configuration (static dir, link check settings)
        check_external: Also request every external link

    Returns:
        LintReport with all issues found
    """
    config = config or SiteConfig.from_env(site.root)
    report = LintReport()
    series = collect_series(site.documents, config.series_dir)

    check_titles(site, report)
    check_duplicate_slugs(site, report)
    check_series(site, series, report)
    check_images(site, config, report)
    check_internal_links(site, series, config, report)
    if check_external:
        check_external_links(site, config, report)

    logger.debug(f"Lint found {len(report.errors)} errors and {len(report.warnings)} warnings")
    return report
