"""
Tests for environment configuration.
"""

from pathlib import Path

import pytest

from siteindex import SiteConfig


def test_defaults(monkeypatch, tmp_path):
    for name in ("SITE_DATA_FORMAT", "SITE_POSTS_DIRS", "SITE_STATIC_DIR", "SITE_INCLUDE_DRAFTS"):
        monkeypatch.delenv(name, raising=False)

    config = SiteConfig.from_env(tmp_path / "content")
    assert config.static_dir == tmp_path / "static"
    assert config.posts_dirs == ("_posts", "posts")
    assert config.data_dir == tmp_path / "content" / "_data"
    assert config.data_ext == ".yaml"
    assert config.include_drafts is False


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SITE_CONTENT_DIR", str(tmp_path / "site"))
    monkeypatch.setenv("SITE_DATA_FORMAT", "JSON")
    monkeypatch.setenv("SITE_POSTS_DIRS", "articles, _posts")
    monkeypatch.setenv("SITE_INCLUDE_DRAFTS", "yes")
    monkeypatch.setenv("SNIPPET_TAB_STOP", "4")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example,https://b.example")

    config = SiteConfig.from_env()
    assert config.content_dir == Path(tmp_path / "site")
    assert config.data_format == "json"
    assert config.data_ext == ".json"
    assert config.posts_dirs == ("articles", "_posts")
    assert config.include_drafts is True
    assert config.tab_stop == 4
    assert config.cors_origins == ("https://a.example", "https://b.example")


def test_invalid_format(monkeypatch):
    monkeypatch.setenv("SITE_DATA_FORMAT", "toml")
    with pytest.raises(ValueError, match="SITE_DATA_FORMAT"):
        SiteConfig.from_env()
