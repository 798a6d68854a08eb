"""
JSON Schema registry.

Schemas live as <schemas_dir>/<name>.json and govern the document with the same
logical name. A document without a schema is always valid.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError, ValidationError

from errors import FailureKind, FileOperation
from json_store import atomic_write_json, read_json
from persistence.paths import JSON_EXTENSION, ensure_dir, logical_name, sanitize_name, usable_name

logger = logging.getLogger(__name__)


def _pointer(error: ValidationError) -> str:
    if not error.absolute_path:
        return ""
    return "/" + "/".join(str(part) for part in error.absolute_path)


def format_error(error: ValidationError) -> str:
    return f"{_pointer(error)} {error.message}".strip()


class SchemaValidator:
    def __init__(self, schemas_dir: Path):
        self._schemas_dir = Path(schemas_dir)
        self._lock = threading.Lock()
        self._schemas: dict[str, Any] = {}
        self._validators: dict[str, Draft7Validator] = {}
        self.reload()

    @property
    def schemas_dir(self) -> Path:
        return self._schemas_dir

    def _schema_files(self) -> list[Path]:
        return sorted(
            p
            for p in self._schemas_dir.iterdir()
            if p.name.endswith(JSON_EXTENSION) and usable_name(p.name) and p.is_file()
        )

    def _load_all(self) -> tuple[dict[str, Any], dict[str, Draft7Validator]]:
        schemas: dict[str, Any] = {}
        validators: dict[str, Draft7Validator] = {}
        try:
            files = self._schema_files()
        except OSError:
            # Missing directory just means no schemas yet.
            return schemas, validators

        for path in files:
            # Keyed the same way lookups are, so "my post.json" governs "my_post".
            name = logical_name(path.name)
            if name in schemas:
                logger.warning("SCHEMA %s skipped: duplicates %s", path.name, name)
                continue
            try:
                schema = read_json(path)
                Draft7Validator.check_schema(schema)
            except (OSError, ValueError, SchemaError) as e:
                logger.warning("SCHEMA %s skipped: %s", path.name, e)
                continue
            schemas[name] = schema
            validators[name] = Draft7Validator(schema, format_checker=FormatChecker())
        return schemas, validators

    def reload(self) -> None:
        """Drop every compiled validator and rescan the schema directory."""
        schemas, validators = self._load_all()
        with self._lock:
            self._schemas = schemas
            self._validators = validators
        logger.info("SCHEMAS loaded: %d from %s", len(schemas), self._schemas_dir)

    def validate(self, name: str, document: Any) -> FileOperation:
        with self._lock:
            validator = self._validators.get(logical_name(name))
        if validator is None:
            return FileOperation.ok(document)

        errors = sorted(
            validator.iter_errors(document),
            key=lambda e: ([str(p) for p in e.absolute_path], e.message),
        )
        if not errors:
            return FileOperation.ok(document)
        return FileOperation.fail(
            FailureKind.VALIDATION_FAILED,
            "Validation failed",
            [format_error(e) for e in errors],
        )

    def has_schema(self, name: str) -> bool:
        if not usable_name(name):
            return False
        with self._lock:
            return logical_name(name) in self._schemas

    def get_schema(self, name: str) -> Any | None:
        if not usable_name(name):
            return None
        with self._lock:
            return self._schemas.get(logical_name(name))

    def list_schemas(self) -> FileOperation:
        try:
            if not self._schemas_dir.exists():
                return FileOperation.ok([])
            names = list(dict.fromkeys(logical_name(p.name) for p in self._schema_files()))
        except OSError as e:
            return FileOperation.fail(FailureKind.IO_FAILURE, f"Failed to list schemas: {e}")
        return FileOperation.ok(names)

    def save_schema(self, name: str, schema: Any) -> FileOperation:
        if not usable_name(name):
            return FileOperation.fail(FailureKind.BAD_REQUEST, "Invalid schema name")
        if not isinstance(schema, dict):
            return FileOperation.fail(FailureKind.BAD_REQUEST, "Invalid schema format")
        try:
            Draft7Validator.check_schema(schema)
        except SchemaError as e:
            return FileOperation.fail(FailureKind.BAD_REQUEST, "Invalid schema format", [e.message])

        path = self._schemas_dir / sanitize_name(name)
        try:
            ensure_dir(self._schemas_dir)
            atomic_write_json(path, schema)
        except (OSError, TypeError, ValueError) as e:
            logger.error("SCHEMA SAVE %s failed: %r", path.name, e)
            return FileOperation.fail(FailureKind.IO_FAILURE, "Failed to save schema")
        self.reload()
        return FileOperation.ok(schema)

    def _existing_path(self, name: str) -> Path | None:
        path = self._schemas_dir / sanitize_name(name)
        if path.is_file():
            return path
        target = logical_name(name)
        try:
            return next((p for p in self._schema_files() if logical_name(p.name) == target), None)
        except OSError:
            return None

    def delete_schema(self, name: str) -> FileOperation:
        path = self._existing_path(name) if usable_name(name) else None
        if path is None:
            return FileOperation.fail(FailureKind.NOT_FOUND, "Schema not found")
        try:
            path.unlink()
        except OSError as e:
            logger.error("SCHEMA DELETE %s failed: %r", path.name, e)
            return FileOperation.fail(FailureKind.IO_FAILURE, "Failed to delete schema")
        self.reload()
        return FileOperation.ok()
