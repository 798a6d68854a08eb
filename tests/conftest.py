from __future__ import annotations

from pathlib import Path
import sys

import bcrypt
import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    # Low work factor keeps the suite fast; production uses the default rounds.
    return bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def config(tmp_path: Path, admin_password_hash: str):
    """
    A config whose directories all live under tmp_path so tests never touch real ./data.
    """
    from settings import LiteJsonConfig

    return LiteJsonConfig.model_validate(
        {
            "dataDir": str(tmp_path / "data"),
            "schemasDir": str(tmp_path / "schemas"),
            "historyDir": str(tmp_path / ".history"),
            "port": 3000,
            "admin": {"username": ADMIN_USERNAME, "passwordHash": admin_password_hash},
            "permissions": {"menu.json": "admin", "about": "public"},
        }
    )


@pytest.fixture
def settings(tmp_path: Path):
    from settings import Settings

    return Settings(
        config_path=str(tmp_path / "litejson.config.json"),
        host="127.0.0.1",
        cookie_secure=False,
        log_level="INFO",
        debug_log_requests=True,
    )


@pytest.fixture
def app(config, settings):
    from app import create_app

    return create_app(config, settings)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def admin_client(app):
    """A client that has already logged in and carries the session cookie."""
    from fastapi.testclient import TestClient

    c = TestClient(app)
    r = c.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return c
