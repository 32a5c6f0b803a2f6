# tests/test_endpoints.py
from __future__ import annotations

import base64
import json

from conftest import chart_payload

sample = {
    "chart_a": chart_payload([("Sun", 100.0), ("Venus", 10.0), ("Mercury", 0.0)], ascendant=10.0),
    "chart_b": chart_payload([("Moon", 100.0), ("Mars", 12.0), ("Saturn", 180.0)], ascendant=5.0),
}


def _basic(user: str, pw: str) -> dict:
    token = base64.b64encode(f"{user}:{pw}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def test_health(client):
    for path in ("/health", "/healthz", "/api/health"):
        rv = client.get(path)
        assert rv.status_code == 200
        assert rv.get_json()["ok"] is True

def test_config(client):
    rv = client.get("/api/config")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["default_locale"] == "en"
    assert data["supported_locales"] == ["en", "ne"]
    assert "version" in data

def test_catalog(client):
    rv = client.get("/api/synastry/catalog")
    assert rv.status_code == 200
    data = rv.get_json()
    assert [a["aspect"] for a in data["aspects"]][:2] == ["conjunction", "opposition"]
    assert data["tracked_bodies"][0] == "Sun"
    assert data["life_areas"]["7"] == "Partnership, Marriage"

def test_synastry(client):
    rv = client.post("/api/synastry", json=sample)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True
    result = data["result"]
    assert result["aspects"][0]["aspect"] == "conjunction"
    assert result["aspects"][0]["strength"] == 1.0
    assert len(result["categories"]) == 5
    assert 0.0 <= result["overall_compatibility"] <= 100.0
    assert len(result["key_findings"]) <= 5
    assert result["special"]["ascendant"][0]["planet1"] == "ASC"

def test_synastry_locale(client):
    rv = client.post("/api/synastry", json={**sample, "locale": "ne"})
    assert rv.status_code == 200
    assert rv.get_json()["result"]["meta"]["locale"] == "ne"

def test_synastry_validation_error(client):
    bad = json.loads(json.dumps(sample))
    bad["chart_b"]["house_cusps"] = [0, 30]
    rv = client.post("/api/synastry", json=bad)
    assert rv.status_code == 400
    data = rv.get_json()
    assert data["error"] == "validation_error"
    assert data["details"][0]["loc"] == ["chart_b", "house_cusps"]

def test_synastry_oversized_number_is_validation_error(client):
    bad = json.loads(json.dumps(sample))
    bad["chart_a"]["planets"][0]["longitude"] = 10**400
    rv = client.post("/api/synastry", data=json.dumps(bad), content_type="application/json")
    assert rv.status_code == 400
    data = rv.get_json()
    assert data["error"] == "validation_error"
    assert data["details"][0]["loc"] == ["chart_a", "planets", 0, "longitude"]

def test_synastry_requires_json(client):
    rv = client.post("/api/synastry", data="not json", content_type="text/plain")
    assert rv.status_code == 400
    assert rv.get_json()["ok"] is False

def test_unknown_route_is_json(client):
    rv = client.get("/api/nope")
    assert rv.status_code == 404
    data = rv.get_json()
    assert data["error"] == "http_error" and data["code"] == 404

def test_samples_from_env(monkeypatch, tmp_path):
    path = tmp_path / "samples.json"
    path.write_text(json.dumps([{"name": "pair", **sample}]), encoding="utf-8")
    monkeypatch.setenv("SYNASTRY_SAMPLES", str(path))
    from synastry_app.main import create_app

    c = create_app().test_client()
    data = c.get("/api/synastry/samples").get_json()
    assert [s["name"] for s in data["samples"]] == ["pair"]
    assert c.post("/api/synastry", json=data["samples"][0]).status_code == 200

def test_samples_empty_by_default(client):
    assert client.get("/api/synastry/samples").get_json()["samples"] == []

def test_metrics_requires_auth(client):
    assert client.get("/metrics").status_code == 401
    assert client.get("/metrics", headers=_basic("metrics", "wrong")).status_code == 401

def test_metrics_exposition(client):
    client.get("/api/health")
    rv = client.get("/metrics", headers=_basic("metrics", "secret"))
    assert rv.status_code == 200
    body = rv.get_data(as_text=True)
    assert "synastry_api_requests_total" in body
    assert "synastry_request_seconds" in body
