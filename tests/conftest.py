"""
Shared fixtures: a small site on disk.

content/
    _posts/2012-04-01-why-use-fsharp-intro.md   series order 1
    _posts/2012-04-02-fsharp-vs-csharp.md       series order 2
    _posts/2013-01-01-unfinished.md             draft
    posts/conciseness/index.md                  series order 3 (bundle with image)
    series/why-use-fsharp.md                    series landing page
    about/index.md                              plain page
static/
    assets/intro.png
"""

from pathlib import Path

import pytest

from siteindex import SiteConfig

SERIES_ID = "Why use F#?"


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def post_text(title, series_order=None, series_id=SERIES_ID, extra="", body="Some text.\n"):
    lines = ["---", "layout: post", f'title: "{title}"', f'description: "About {title}"', "nav: why-use-fsharp"]
    if series_order is not None:
        lines.append(f'seriesId: "{series_id}"')
        lines.append(f"seriesOrder: {series_order}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture
def site_dir(tmp_path) -> Path:
    content = tmp_path / "content"

    write(content / "_posts" / "2012-04-01-why-use-fsharp-intro.md", post_text(
        "Introduction to the 'Why use F#' series",
        series_order=1,
        extra='categories: [Introduction, "Why use F#"]\nimage: "/assets/intro.png"',
    ))
    write(content / "_posts" / "2012-04-02-fsharp-vs-csharp.md", post_text(
        "F# syntax in 60 seconds",
        series_order=2,
        body="Back to the [introduction](/posts/why-use-fsharp-intro/).\n",
    ))
    write(content / "_posts" / "2013-01-01-unfinished.md", post_text(
        "Unfinished",
        extra="draft: true",
    ))
    write(content / "posts" / "conciseness" / "index.md", post_text(
        "Conciseness",
        series_order=3,
        extra="date: 2012-05-10",
        body="![sample](./sample.png)\n\n```fsharp\n![not an image](missing.png)\n```\n",
    ))
    write(content / "posts" / "conciseness" / "sample.png", "png")
    write(content / "series" / "why-use-fsharp.md", "\n".join([
        "---",
        "layout: series-index",
        'title: "Why use F#?"',
        'seriesIndexId: "Why use F#?"',
        "seriesIndexOrder: 1",
        "---",
        "All posts in the series.",
        "",
    ]))
    write(content / "about" / "index.md", "---\nlayout: page\ntitle: About\n---\nHello.\n")
    write(tmp_path / "static" / "assets" / "intro.png", "png")

    return content


@pytest.fixture
def site_config(site_dir) -> SiteConfig:
    return SiteConfig(content_dir=site_dir, static_dir=site_dir.parent / "static")
