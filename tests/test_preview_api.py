"""
Tests for the preview API.
"""

from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

import app as preview
from conftest import SERIES_ID, write
from siteindex import SiteConfig


@pytest.fixture
def client(site_dir, site_config, monkeypatch):
    monkeypatch.setattr(preview, "config", site_config)
    monkeypatch.setattr(preview, "state", preview.SiteState())
    preview.load_site(site_dir)
    return TestClient(preview.app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestDocuments:

    def test_list(self, client):
        response = client.get("/api/documents")
        assert response.status_code == 200
        slugs = {doc["slug"] for doc in response.json()}
        assert slugs == {"why-use-fsharp-intro", "fsharp-vs-csharp", "conciseness", "why-use-fsharp", "about"}

    def test_detail_with_navigation(self, client):
        data = client.get("/api/documents/fsharp-vs-csharp").json()
        assert data["title"] == "F# syntax in 60 seconds"
        assert data["body"].startswith("Back to the")
        nav = data["navigation"]
        assert nav["seriesId"] == SERIES_ID
        assert nav["seriesUrl"] == "/series/why-use-fsharp.html"
        assert nav["previous"]["slug"] == "why-use-fsharp-intro"
        assert nav["next"]["url"] == "/posts/conciseness/"

    def test_detail_outside_series(self, client):
        nav = client.get("/api/documents/about").json()["navigation"]
        assert nav == {"seriesId": None, "seriesUrl": None, "previous": None, "next": None}

    def test_unknown_document(self, client):
        response = client.get("/api/documents/nope")
        assert response.status_code == 404
        assert "nope" in response.json()["detail"]


class TestSeries:

    def test_list(self, client):
        data = client.get("/api/series").json()
        assert [entry["seriesId"] for entry in data] == [SERIES_ID]
        assert [doc["seriesOrder"] for doc in data[0]["documents"]] == [1, 2, 3]

    def test_detail(self, client):
        response = client.get(f"/api/series/{quote(SERIES_ID, safe='')}")
        assert response.status_code == 200
        assert response.json()["permalink"] == "/series/why-use-fsharp.html"

    def test_unknown_series(self, client):
        assert client.get("/api/series/missing").status_code == 404


def test_archives(client):
    archives = client.get("/api/archives").json()["archives"]
    assert [(m["year"], m["monthName"]) for m in archives] == [(2012, "May"), (2012, "April")]
    assert archives[1]["posts"][0]["slug"] == "fsharp-vs-csharp"


def test_lint(client, site_dir):
    assert client.get("/api/lint").json() == {"ok": True, "errors": 0, "warnings": 0, "issues": []}

    write(site_dir / "notes" / "index.md", "---\nlayout: page\n---\n")
    client.post("/api/reload")
    report = client.get("/api/lint").json()
    assert report["ok"] is False
    assert report["issues"][0]["code"] == "missing-title"


def test_reload_picks_up_new_documents(client, site_dir):
    write(site_dir / "misc" / "faq.md", "---\ntitle: FAQ\n---\n")
    response = client.post("/api/reload")
    assert response.status_code == 200
    assert response.json() == {"documents": 6, "series": 1}
    assert client.get("/api/documents/faq").status_code == 200


def test_malformed_content_on_reload(client, site_dir):
    write(site_dir / "broken.md", "---\ntitle: [oops\n---\n")
    response = client.post("/api/reload")
    assert response.status_code == 500
    assert "broken.md" in response.json()["detail"]


def test_missing_content_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(preview, "config", SiteConfig(content_dir=tmp_path / "missing"))
    monkeypatch.setattr(preview, "state", preview.SiteState())
    client = TestClient(preview.app)
    assert client.get("/api/documents").status_code == 503
