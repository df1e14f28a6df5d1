import pytest
from starlette.testclient import TestClient

from casino_ledger.app import create_app


@pytest.fixture()
def static_client(tmp_path, monkeypatch):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Casino</h1>", encoding="utf-8")
    (public / "app.js").write_text("console.log('hi');", encoding="utf-8")
    monkeypatch.setenv("CASINO_STATIC_DIR", str(public))
    return TestClient(create_app())


def test_index_is_served(static_client):
    r = static_client.get("/")
    assert r.status_code == 200
    assert "<h1>Casino</h1>" in r.text


def test_assets_are_served(static_client):
    r = static_client.get("/app.js")
    assert r.status_code == 200
    assert "console.log" in r.text


def test_api_routes_take_precedence(static_client):
    r = static_client.get("/api/profile", params={"username": "static-user"})
    assert r.status_code == 200
    assert r.json()["balance"] == 1000


def test_missing_asset_uses_error_shape(static_client):
    r = static_client.get("/missing.css")
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"


def test_wrong_method_on_api_route_falls_through_to_static(static_client):
    # the "/" mount fully matches every path, so a method mismatch reaches it and 404s
    r = static_client.get("/api/game/charge")
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"
