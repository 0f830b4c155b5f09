"""
Tests API : /api/background/* et /api/cards/{id}/editor (store en mémoire)
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from card_engine.api.main import app
from card_engine.api.routes.editor import get_store
from card_engine.sync import InMemoryCardStore


# ── Fixtures ──────────────────────────────────────────────────────────────

class BrokenThemeStore(InMemoryCardStore):
    async def update_card_theme(self, card_id, theme):
        raise RuntimeError("read-only")


def _seed(store):
    store.add_card(
        {"id": "c1", "template_id": None, "theme": {"background": {"mode": "solid", "color": "#fafafa"}}},
        [
            {"id": "b1", "type": "header", "order": 0, "settings": {}, "style": {}},
            {"id": "b2", "type": "bio", "order": 1, "settings": {"text": "x"}, "style": {}},
        ],
    )
    return store


@pytest.fixture
def store():
    return _seed(InMemoryCardStore())


@pytest.fixture
def client(store):
    """Client de test, store en mémoire injecté à la place du store SQLite."""
    app.dependency_overrides[get_store] = lambda: store
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


# ── Background ────────────────────────────────────────────────────────────

class TestBackgroundRoutes:

    def test_migrate(self, client):
        r = client.post("/api/background/migrate", json={"mode": "gradient", "from": "#000", "to": "#fff"})
        assert r.status_code == 200
        data = r.json()
        assert data["version"] == 1
        assert data["base"]["kind"] == "gradient"
        assert data["base"]["stops"][1]["color"] == "#fff"

    def test_migrate_garbage(self, client):
        r = client.post("/api/background/migrate", json={"nothing": True})
        assert r.status_code == 200
        assert r.json()["base"] == {"kind": "solid", "color": "#ffffff"}

    def test_malformed_legacy_color(self, client):
        r = client.post("/api/background/migrate", json={"mode": "solid", "color": 123})
        assert r.status_code == 200
        assert r.json()["base"]["color"] == "#ffffff"
        r = client.post("/api/background/compose", json={"mode": "gradient", "from": 1, "to": 2})
        assert r.status_code == 200
        assert r.json()["layers"][0]["type"] == "linear-gradient"

    def test_compose(self, client):
        r = client.post("/api/background/compose", json={
            "version": 1, "opacity": 0.5,
            "base": {"kind": "image", "url": "u.jpg"},
            "imageOverlay": {"enabled": True},
            "overlays": [{"kind": "grid"}],
        })
        data = r.json()
        assert data["opacity"] == 0.5
        assert [l["role"] for l in data["layers"]] == ["base", "darken", "pattern"]
        assert len(data["css"]) == 3
        assert data["css_string"] == "url('u.jpg')"

    def test_recolor(self, client):
        r = client.post("/api/background/recolor", json={
            "background": {"mode": "gradient", "from": "#000", "to": "#fff"},
            "color_a": "#111", "color_b": "#222",
        })
        stops = r.json()["base"]["stops"]
        assert [s["color"] for s in stops] == ["#111", "#222"]

    def test_presets(self, client):
        data = client.get("/api/background/presets").json()
        assert len(data) == 8
        assert data[0]["id"] == "gold-silk"
        assert data[0]["background"]["overlays"][0]["blendMode"] == "soft-light"

    def test_patterns(self, client):
        data = client.get("/api/background/patterns").json()
        assert {p["value"] for p in data["patterns"]} >= {"dots", "silk", "none"}
        assert "soft-light" in data["blend_modes"]


# ── Editor ────────────────────────────────────────────────────────────────

class TestEditorRoutes:

    def test_get(self, client):
        r = client.get("/api/cards/c1/editor")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "idle"
        assert data["background"]["base"]["color"] == "#fafafa"
        assert [b["id"] for b in data["blocks"]] == ["b1", "b2"]
        assert data["layers"]["layers"][0]["type"] == "solid"

    def test_get_unknown(self, client):
        assert client.get("/api/cards/nope/editor").status_code == 404

    def test_put_saves(self, client, store):
        r = client.put("/api/cards/c1/editor", json={
            "blocks": [
                {"id": "b2", "type": "bio", "order": 0, "settings": {"text": "y"}},
                {"id": "b1", "type": "header", "order": 1},
            ],
            "background": {"version": 1, "base": {"kind": "solid", "color": "#000000"}},
        })
        assert r.status_code == 200
        data = r.json()
        assert data["result"]["status"] == "saved"
        assert data["session"]["status"] == "saved"
        assert store.blocks["b2"]["settings"] == {"text": "y"}
        assert store.blocks["b2"]["order"] == 0
        assert store.cards["c1"]["theme"]["background"]["base"]["color"] == "#000000"

    def test_put_empty_draft_skipped(self, client, store):
        r = client.put("/api/cards/c1/editor", json={})
        assert r.status_code == 200
        assert r.json()["result"]["status"] == "skipped"
        assert store.calls == []

    def test_put_type_change_422(self, client):
        r = client.put("/api/cards/c1/editor", json={"blocks": [{"id": "b1", "type": "video"}]})
        assert r.status_code == 422

    def test_put_unknown_404(self, client):
        assert client.put("/api/cards/nope/editor", json={}).status_code == 404

    def test_put_failure_409(self):
        store = _seed(BrokenThemeStore())
        app.dependency_overrides[get_store] = lambda: store
        try:
            r = TestClient(app).put("/api/cards/c1/editor", json={"background": {"mode": "solid", "color": "#111"}})
        finally:
            app.dependency_overrides.clear()
        assert r.status_code == 409
        err = r.json()["result"]["error"]
        assert err["stage"] == "theme" and err["entity_id"] == "c1"


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
