from __future__ import annotations

import json

SCHEMA = {
    "type": "object",
    "properties": {"title": {"type": "string"}},
    "required": ["title"],
}


def test_schema_crud(client, admin_client, config):
    assert client.get("/api/schemas").json() == {"schemas": []}
    assert client.get("/api/schema/about").status_code == 404

    r = admin_client.post("/api/schema/about.json", json={"schema": SCHEMA})
    assert r.status_code == 200
    assert r.json() == {"success": True, "schema": SCHEMA}
    assert (config.schemas_path / "about.json").is_file()

    # Anonymous reads
    r = client.get("/api/schema/about")
    assert r.status_code == 200
    assert r.json() == SCHEMA
    assert client.get("/api/schemas").json() == {"schemas": ["about"]}

    r = admin_client.delete("/api/schema/about")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get("/api/schema/about").status_code == 404
    assert admin_client.delete("/api/schema/about").status_code == 404


def test_schema_mutations_require_session(client):
    assert client.post("/api/schema/about", json={"schema": SCHEMA}).status_code == 401
    assert client.delete("/api/schema/about").status_code == 401


def test_schema_payload_is_checked(admin_client):
    r = admin_client.post("/api/schema/about", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "Schema is required"}

    r = admin_client.post("/api/schema/about", json={"schema": "not an object"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid schema format"

    r = admin_client.post("/api/schema/about", json={"schema": {"type": "nonsense"}})
    assert r.status_code == 400
    assert r.json()["details"]


def test_schema_update_takes_effect_immediately(admin_client):
    admin_client.post("/api/file/about", json={"data": {"anything": 1}})
    admin_client.post("/api/schema/about", json={"schema": SCHEMA})

    r = admin_client.put("/api/file/about", json={"data": {"anything": 2}})
    assert r.status_code == 400

    admin_client.delete("/api/schema/about")
    r = admin_client.put("/api/file/about", json={"data": {"anything": 2}})
    assert r.status_code == 200


def test_schema_file_with_unsafe_name_governs_its_logical_name(config, settings):
    from fastapi.testclient import TestClient

    from app import create_app
    from conftest import ADMIN_PASSWORD, ADMIN_USERNAME

    config.schemas_path.mkdir(parents=True, exist_ok=True)
    (config.schemas_path / "my post.json").write_text(json.dumps(SCHEMA), encoding="utf-8")

    c = TestClient(create_app(config, settings))
    assert c.get("/api/schemas").json() == {"schemas": ["my_post"]}
    assert c.get("/api/schema/my_post").json() == SCHEMA

    c.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    r = c.post("/api/file/my_post", json={"data": {"body": "no title"}})
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"
    assert c.post("/api/file/my post", json={"data": {"title": "ok"}}).status_code == 200


def test_schema_with_empty_name_is_refused(admin_client, config):
    r = admin_client.post("/api/schema/", json={"schema": SCHEMA})
    assert r.status_code == 400
    assert not (config.schemas_path / ".json").exists()
    assert admin_client.get("/api/schema/").status_code == 404
