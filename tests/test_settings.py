from __future__ import annotations

import json
from pathlib import Path

import pytest

from settings import ConfigError, LiteJsonConfig, get_settings, load_config


def _write(path: Path, doc) -> Path:
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def _valid_doc(**overrides):
    doc = {
        "dataDir": "./data",
        "schemasDir": "./schemas",
        "port": 3000,
        "admin": {"username": "admin", "passwordHash": "$2b$10$abcdefghijklmnopqrstuv"},
        "permissions": {"menu.json": "admin"},
    }
    doc.update(overrides)
    return doc


def test_load_valid_config(tmp_path: Path):
    cfg = load_config(_write(tmp_path / "c.json", _valid_doc()))
    assert cfg.port == 3000
    assert cfg.admin.username == "admin"
    assert cfg.permissions == {"menu.json": "admin"}
    assert cfg.history_path == Path("./data").parent / ".history"


def test_defaults_fill_missing_optional_keys(tmp_path: Path):
    doc = {"admin": {"username": "admin", "passwordHash": "x"}}
    cfg = load_config(_write(tmp_path / "c.json", doc))
    assert cfg.data_dir == "./data"
    assert cfg.schemas_dir == "./schemas"
    assert cfg.port == 3000
    assert cfg.permissions == {}


def test_missing_file_is_config_error(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.json")


def test_invalid_json_is_config_error(tmp_path: Path):
    path = tmp_path / "c.json"
    path.write_text("{nope", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"admin": {"username": "admin"}},
        {"admin": {"username": "", "passwordHash": "x"}},
        {"port": 0},
        {"port": 65536},
        {"dataDir": ""},
        {"schemasDir": "   "},
        {"permissions": {"menu": "superuser"}},
    ],
)
def test_validation_failures(tmp_path: Path, overrides):
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(_write(tmp_path / "c.json", _valid_doc(**overrides)))


def test_disk_doc_uses_camel_case_keys():
    cfg = LiteJsonConfig.model_validate(_valid_doc())
    doc = cfg.to_disk_doc()
    assert set(doc) == {"dataDir", "schemasDir", "port", "admin", "permissions"}
    assert doc["admin"]["passwordHash"].startswith("$2b$")


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LITEJSON_CONFIG", "/etc/litejson.json")
    monkeypatch.setenv("COOKIE_SECURE", "yes")
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "0")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = get_settings()
    assert s.config_path == "/etc/litejson.json"
    assert s.cookie_secure is True
    assert s.debug_log_requests is False
    assert s.log_level == "DEBUG"
