from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

# Add parent directory to path for siteindex import
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from siteindex import (
    Document,
    FrontMatterError,
    Series,
    SiteConfig,
    collect_archives,
    collect_series,
    lint_site,
    load_documents,
    navigation_for,
)
from siteindex.documents import Site

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

config = SiteConfig.from_env()


class DocumentSummary(BaseModel):
    slug: str
    kind: str
    url: str
    date: str
    layout: str = ""
    title: str = ""
    description: str = ""
    nav: str = ""
    seriesId: str = ""
    seriesOrder: int = 0
    categories: List[str] = Field(default_factory=list)


class NavLink(BaseModel):
    slug: str
    title: str
    url: str
    seriesOrder: int


class NavigationPayload(BaseModel):
    seriesId: Optional[str] = None
    seriesUrl: Optional[str] = None
    previous: Optional[NavLink] = None
    next: Optional[NavLink] = None


class DocumentDetail(DocumentSummary):
    body: str
    navigation: NavigationPayload


class SeriesPayload(BaseModel):
    seriesId: str
    title: str
    permalink: str
    documents: List[DocumentSummary]


class SiteState:
    """Loaded site and derived views, replaced wholesale on reload."""

    def __init__(self) -> None:
        self.site: Optional[Site] = None
        self.series: Dict[str, Series] = {}

    def load(self, content_dir: Path) -> Site:
        site = load_documents(content_dir, config)
        self.site = site
        self.series = collect_series(site.documents, config.series_dir)
        logger.info(f"Loaded {len(site.documents)} documents and {len(self.series)} series from {content_dir}")
        return site

    def require(self) -> Site:
        if self.site is None:
            try:
                self.load(config.content_dir)
            except FileNotFoundError as exc:
                raise HTTPException(status_code=503, detail=str(exc)) from exc
            except FrontMatterError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc
        return self.site


state = SiteState()


def load_site(content_dir: Path) -> Site:
    return state.load(Path(content_dir))


def _nav_link(doc: Optional[Document]) -> Optional[NavLink]:
    if doc is None:
        return None
    return NavLink(slug=doc.slug, title=doc.title, url=doc.permalink, seriesOrder=doc.series_order)


def _series_payload(entry: Series) -> SeriesPayload:
    return SeriesPayload(
        seriesId=entry.series_id,
        title=entry.title,
        permalink=entry.permalink,
        documents=[DocumentSummary(**doc.summary()) for doc in entry.documents],
    )


app = FastAPI(title="Site Content Preview", version="1.0.0")

# For production, set CORS_ORIGINS="https://yourdomain.com"
allowed_origins = list(config.cors_origins)
if allowed_origins == ["*"]:
    logger.warning("CORS is set to allow all origins. This is not recommended for production!")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/documents", response_model=List[DocumentSummary])
def list_documents() -> List[DocumentSummary]:
    """List every loaded document in path order."""
    site = state.require()
    return [DocumentSummary(**doc.summary()) for doc in site.documents]


@app.get("/api/documents/{slug}", response_model=DocumentDetail)
def get_document(slug: str) -> DocumentDetail:
    """Get one document with its body and series navigation."""
    site = state.require()
    doc = site.get(slug)
    if doc is None:
        raise HTTPException(status_code=404, detail=f"Document '{slug}' not found.")

    nav = navigation_for(doc, state.series)
    navigation = NavigationPayload(
        seriesId=nav.series.series_id if nav.series else None,
        seriesUrl=nav.series.permalink if nav.series else None,
        previous=_nav_link(nav.previous),
        next=_nav_link(nav.next),
    )
    return DocumentDetail(**doc.summary(), body=doc.body, navigation=navigation)


@app.get("/api/series", response_model=List[SeriesPayload])
def list_series() -> List[SeriesPayload]:
    state.require()
    return [_series_payload(entry) for entry in state.series.values()]


@app.get("/api/series/{series_id}", response_model=SeriesPayload)
def get_series(series_id: str) -> SeriesPayload:
    state.require()
    entry = state.series.get(series_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Series '{series_id}' not found.")
    return _series_payload(entry)


@app.get("/api/archives")
def get_archives() -> JSONResponse:
    """Posts grouped by year and month, newest first."""
    site = state.require()
    months = collect_archives(site.posts)
    return JSONResponse({
        "archives": [
            {
                "year": month.year,
                "month": month.month,
                "monthName": month.month_name,
                "posts": [DocumentSummary(**post.summary()).model_dump() for post in month.posts],
            }
            for month in months
        ]
    })


@app.get("/api/lint")
def get_lint_report() -> JSONResponse:
    """Run the local content checks (no external link requests)."""
    site = state.require()
    report = lint_site(site, config)
    return JSONResponse({
        "ok": report.ok,
        "errors": len(report.errors),
        "warnings": len(report.warnings),
        "issues": [
            {
                "severity": issue.severity,
                "code": issue.code,
                "path": issue.path,
                "line": issue.line,
                "message": issue.message,
            }
            for issue in report.issues
        ],
    })


@app.post("/api/reload")
def reload_site() -> Dict[str, int]:
    """Reload the content from disk."""
    try:
        site = load_site(state.site.root if state.site else config.content_dir)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except FrontMatterError as exc:
        logger.error(f"Reload failed: {exc}")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"documents": len(site.documents), "series": len(state.series)}


def run_server(host: str = "0.0.0.0", port: int = config.preview_port, reload: bool = False) -> None:
    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - runtime guard
        raise SystemExit(
            "Missing dependency 'uvicorn'. Install it with 'pip install uvicorn[standard]' and retry."
        ) from exc

    uvicorn.run(
        "app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    run_server(port=config.preview_port, reload=False)
