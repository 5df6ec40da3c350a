"""
Tests for the Ingress command line scripts.

Each script's main() is run with a patched sys.argv and must return 0 on
success and 1 when it reports an error.
"""

import sys

import pytest

import build_data
import check_content
import sync_snippets
from conftest import post_text, write


def run(monkeypatch, module, *args):
    monkeypatch.setattr(sys, "argv", [module.__name__ + ".py", *map(str, args)])
    return module.main()


class TestCheckContent:
    """Tests for check_content.main()"""

    def args(self, site_dir):
        return ["--content-dir", site_dir, "--static-dir", site_dir.parent / "static"]

    def test_clean_site_passes(self, site_dir, monkeypatch, capsys):
        assert run(monkeypatch, check_content, *self.args(site_dir)) == 0
        assert "All content checks passed" in capsys.readouterr().out

    def test_errors_fail(self, site_dir, monkeypatch, capsys):
        write(site_dir / "notes" / "index.md", "---\nlayout: page\n---\n")
        assert run(monkeypatch, check_content, *self.args(site_dir)) == 1
        assert "[missing-title]" in capsys.readouterr().out

    def test_warnings_pass_unless_requested(self, site_dir, monkeypatch):
        write(site_dir / "_posts" / "2012-06-01-later.md", post_text("Later", series_order=5))
        assert run(monkeypatch, check_content, *self.args(site_dir)) == 0
        assert run(monkeypatch, check_content, *self.args(site_dir), "--warnings-as-errors") == 1

    def test_malformed_front_matter(self, site_dir, monkeypatch, capsys):
        write(site_dir / "broken.md", "---\ntitle: [oops\n---\n")
        assert run(monkeypatch, check_content, *self.args(site_dir)) == 1
        assert "Front-matter error" in capsys.readouterr().out

    def test_missing_content_dir(self, tmp_path, monkeypatch):
        assert run(monkeypatch, check_content, "--content-dir", tmp_path / "missing") == 1


class TestBuildData:
    """Tests for build_data.main()"""

    def test_build(self, site_dir, monkeypatch):
        assert run(monkeypatch, build_data, "--content-dir", site_dir, "--format", "json") == 0
        assert (site_dir / "_data" / "series.json").exists()

    def test_duplicate_order_fails_in_strict_mode(self, site_dir, monkeypatch, capsys):
        write(site_dir / "_posts" / "2012-04-03-clash.md", post_text("Clash", series_order=2))
        assert run(monkeypatch, build_data, "--content-dir", site_dir) == 1
        assert "--no-strict" in capsys.readouterr().out
        assert not (site_dir / "_data").exists()

    def test_no_strict_writes_anyway(self, site_dir, monkeypatch):
        write(site_dir / "_posts" / "2012-04-03-clash.md", post_text("Clash", series_order=2))
        assert run(monkeypatch, build_data, "--content-dir", site_dir, "--format", "yaml", "--no-strict") == 0
        assert (site_dir / "_data" / "series.yaml").exists()

    def test_malformed_front_matter_fails(self, site_dir, monkeypatch, capsys):
        write(site_dir / "broken" / "index.md", "---\nseriesOrder: second\n---\n")
        assert run(monkeypatch, build_data, "--content-dir", site_dir) == 1
        assert "broken/index.md" in capsys.readouterr().out

    def test_missing_content_dir(self, tmp_path, monkeypatch):
        assert run(monkeypatch, build_data, "--content-dir", tmp_path / "missing") == 1


class TestSyncSnippets:
    """Tests for sync_snippets.main()"""

    @pytest.fixture
    def posts_dir(self, tmp_path):
        posts = tmp_path / "posts"
        write(posts / "records" / "index.md", "---\ntitle: Records\n---\n```fsharp src=#add\nold\n```\n")
        write(posts / "records" / "index.fsx", "//>add\nlet add x y = x + y\n//<\n")
        return posts

    def test_sync_and_export(self, posts_dir, tmp_path, monkeypatch):
        export_dir = tmp_path / "code"
        assert run(monkeypatch, sync_snippets, "records", "--posts-dir", posts_dir, "--export-dir", export_dir) == 0
        assert "let add x y = x + y" in (posts_dir / "records" / "index.md").read_text(encoding="utf-8")
        assert "DO NOT EDIT" in (export_dir / "records" / "records.fsx").read_text(encoding="utf-8")

    def test_missing_code_file(self, posts_dir, monkeypatch):
        write(posts_dir / "about" / "index.md", "---\ntitle: About\n---\n")
        assert run(monkeypatch, sync_snippets, "about", "--posts-dir", posts_dir) == 1

    def test_missing_posts_dir(self, tmp_path, monkeypatch):
        assert run(monkeypatch, sync_snippets, "--posts-dir", tmp_path / "missing") == 1
