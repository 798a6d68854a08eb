from __future__ import annotations

import pytest

from settings import APP_VERSION, ConfigError


def test_app_smoke_routes(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["version"] == APP_VERSION
    assert "timestamp" in body

    r = client.get("/")
    assert r.status_code == 200
    info = r.json()
    assert info["name"] == "LiteJSON"
    assert "GET /api/files" in info["endpoints"]


def test_unknown_route_uses_error_body(client):
    r = client.get("/no/such/route")
    assert r.status_code == 404
    assert "error" in r.json()


def test_create_app_creates_directories(config, settings):
    from app import create_app

    create_app(config, settings)
    assert config.data_path.is_dir()
    assert config.schemas_path.is_dir()
    assert config.history_path.is_dir()


def test_create_app_without_config_file_fails(settings):
    from app import create_app

    with pytest.raises(ConfigError):
        create_app(settings=settings)
