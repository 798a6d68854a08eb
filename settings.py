from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

APP_NAME = "LiteJSON"
APP_VERSION = "1.0.0"
DEFAULT_CONFIG_PATH = "./litejson.config.json"
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024

Permission = Literal["public", "admin"]


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Config file location
    config_path: str

    # Server
    host: str
    cookie_secure: bool

    # Logging / debug
    log_level: str
    debug_log_requests: bool

    # Request bodies larger than this are refused with 413
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES


def get_settings() -> Settings:
    config_path = os.getenv("LITEJSON_CONFIG", DEFAULT_CONFIG_PATH)
    host = os.getenv("HOST", "127.0.0.1")

    # Cookies are sent over plain HTTP unless explicitly marked secure.
    cookie_secure = _env_bool("COOKIE_SECURE", False)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)
    max_body_bytes = int(os.getenv("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES)))

    return Settings(
        config_path=config_path,
        host=host,
        cookie_secure=cookie_secure,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
        max_body_bytes=max_body_bytes,
    )


class AdminCredentials(BaseModel):
    username: str = Field(min_length=1)
    password_hash: str = Field(alias="passwordHash", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class LiteJsonConfig(BaseModel):
    """
    Mirrors the on-disk litejson.config.json:
      {
        "dataDir": "./data",
        "schemasDir": "./schemas",
        "port": 3000,
        "admin": { "username": "...", "passwordHash": "$2b$..." },
        "permissions": { "<name>": "public" | "admin" }
      }
    """

    data_dir: str = Field(default="./data", alias="dataDir", min_length=1)
    schemas_dir: str = Field(default="./schemas", alias="schemasDir", min_length=1)
    history_dir: str | None = Field(default=None, alias="historyDir")
    port: int = Field(default=3000, ge=1, le=65535)
    admin: AdminCredentials
    permissions: dict[str, Permission] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("data_dir", "schemas_dir")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Data and schemas directories are required")
        return value

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @property
    def schemas_path(self) -> Path:
        return Path(self.schemas_dir)

    @property
    def history_path(self) -> Path:
        if self.history_dir:
            return Path(self.history_dir)
        # Backups live beside the data directory, never inside it.
        return self.data_path.parent / ".history"

    def to_disk_doc(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def load_config(path: str | Path) -> LiteJsonConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to load config: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError("Failed to load config: top-level value must be an object")
    try:
        return LiteJsonConfig.model_validate(raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid config: {problems}") from e
