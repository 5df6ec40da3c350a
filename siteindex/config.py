"""
Site configuration for the content tooling.

Values come from environment variables, optionally loaded from a .env file
at the repository root.

Environment:
    SITE_CONTENT_DIR      Root of the markdown content (default: ./content)
    SITE_STATIC_DIR       Static assets used to resolve rooted image links
    SITE_DATA_DIR         Output directory for data files, relative to content (default: _data)
    SITE_POSTS_DIRS       Comma-separated directory names holding posts (default: _posts,posts)
    SITE_SERIES_DIR       Prefix for series landing pages without an index page (default: series)
    SITE_DATA_FORMAT      yaml or json (default: yaml)
    SITE_INCLUDE_DRAFTS   Load documents marked draft (default: false)
    SNIPPET_TAB_STOP      Indent width for extracted code fragments (default: 2)
    SNIPPET_CODE_EXT      Extension of companion code files (default: .fsx)
    LINK_CHECK_TIMEOUT    Seconds per external link request (default: 10)
    LINK_CHECK_WORKERS    Parallel external link requests (default: 20)
    SITE_BASE_URL         Site URL used in exported code file headers (default: empty)
    PREVIEW_PORT          Port of the preview API (default: 8800)
    CORS_ORIGINS          Allowed origins for the preview API (default: *)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[1]

env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.environ.get(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class SiteConfig:
    """Settings shared by the loader, builder, linter and preview API."""
    content_dir: Path = BASE_DIR / "content"
    static_dir: Optional[Path] = None
    data_dir_name: str = "_data"
    posts_dirs: Tuple[str, ...] = ("_posts", "posts")
    series_dir: str = "series"
    data_format: str = "yaml"
    include_drafts: bool = False
    tab_stop: int = 2
    code_ext: str = ".fsx"
    link_timeout: float = 10.0
    link_workers: int = 20
    base_url: str = ""
    preview_port: int = 8800
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))

    @property
    def data_dir(self) -> Path:
        return self.content_dir / self.data_dir_name

    @property
    def data_ext(self) -> str:
        return ".json" if self.data_format == "json" else ".yaml"

    @classmethod
    def from_env(cls, content_dir: Optional[Path] = None) -> "SiteConfig":
        content = Path(content_dir or os.environ.get("SITE_CONTENT_DIR", BASE_DIR / "content"))
        static_raw = os.environ.get("SITE_STATIC_DIR")
        static = Path(static_raw) if static_raw else content.parent / "static"

        data_format = os.environ.get("SITE_DATA_FORMAT", "yaml").lower()
        if data_format not in ("yaml", "json"):
            raise ValueError(f"Invalid SITE_DATA_FORMAT '{data_format}'. Must be one of: ['yaml', 'json']")

        return cls(
            content_dir=content,
            static_dir=static,
            data_dir_name=os.environ.get("SITE_DATA_DIR", "_data"),
            posts_dirs=_env_list("SITE_POSTS_DIRS", "_posts,posts"),
            series_dir=os.environ.get("SITE_SERIES_DIR", "series"),
            data_format=data_format,
            include_drafts=_env_bool("SITE_INCLUDE_DRAFTS", False),
            tab_stop=int(os.environ.get("SNIPPET_TAB_STOP", "2")),
            code_ext=os.environ.get("SNIPPET_CODE_EXT", ".fsx"),
            link_timeout=float(os.environ.get("LINK_CHECK_TIMEOUT", "10")),
            link_workers=int(os.environ.get("LINK_CHECK_WORKERS", "20")),
            base_url=os.environ.get("SITE_BASE_URL", ""),
            preview_port=int(os.environ.get("PREVIEW_PORT", "8800")),
            cors_origins=_env_list("CORS_ORIGINS", "*"),
        )
