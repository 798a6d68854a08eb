from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from errors import FailureKind, FileOperation
from json_store import atomic_write_json, read_json

from .interfaces import DocumentStore, MergeCheck
from .locks import NameLockRegistry
from .paths import JSON_EXTENSION, backup_path, ensure_dir, sanitize_name, usable_name

logger = logging.getLogger(__name__)

_NOT_FOUND = "File not found"


class DiskDocumentStore(DocumentStore):
    """
    Stores each document as <data_dir>/<sanitized-name>.json.

    - Every mutation or deletion first copies the current file into history_dir.
    - Writes go to a sibling temp file and are renamed over the final path.
    - No in-memory cache: the directory is the only state.
    """

    def __init__(self, data_dir: Path, history_dir: Path):
        self._data_dir = Path(data_dir)
        self._history_dir = Path(history_dir)
        self._locks = NameLockRegistry()
        self._ensure_directories()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def history_dir(self) -> Path:
        return self._history_dir

    def _ensure_directories(self) -> None:
        ensure_dir(self._data_dir)
        ensure_dir(self._history_dir)

    def path_for(self, name: str) -> Path:
        return self._data_dir / sanitize_name(name)

    def _backup(self, path: Path) -> Path | None:
        if not path.exists():
            return None
        self._ensure_directories()
        target = backup_path(self._history_dir, path.name)
        shutil.copyfile(path, target)
        return target

    def read(self, name: str) -> FileOperation:
        if not usable_name(name):
            return FileOperation.fail(FailureKind.NOT_FOUND, _NOT_FOUND)
        path = self.path_for(name)
        if not path.is_file():
            return FileOperation.fail(FailureKind.NOT_FOUND, _NOT_FOUND)
        try:
            return FileOperation.ok(read_json(path))
        except (OSError, ValueError) as e:
            logger.error("READ %s failed: %r", path.name, e)
            return FileOperation.fail(FailureKind.IO_FAILURE, f"Failed to read file: {e}")

    def write(self, name: str, document: Any) -> FileOperation:
        if not usable_name(name):
            return FileOperation.fail(FailureKind.BAD_REQUEST, "Invalid file name")
        path = self.path_for(name)
        with self._locks.held(path.name):
            try:
                self._ensure_directories()
                self._backup(path)
                atomic_write_json(path, document)
            except (OSError, TypeError, ValueError) as e:
                logger.error("WRITE %s failed: %r", path.name, e)
                return FileOperation.fail(FailureKind.IO_FAILURE, f"Failed to write file: {e}")
        logger.info("WRITE %s", path.name)
        return FileOperation.ok(document)

    def merge(self, name: str, patch: dict[str, Any], check: MergeCheck | None = None) -> FileOperation:
        if not usable_name(name):
            return FileOperation.fail(FailureKind.NOT_FOUND, _NOT_FOUND)
        path = self.path_for(name)
        with self._locks.held(path.name):
            existing = self.read(name)
            if not existing.success:
                return existing
            if not isinstance(existing.data, dict) or not isinstance(patch, dict):
                return FileOperation.fail(
                    FailureKind.BAD_REQUEST, "Partial updates require JSON objects on both sides"
                )
            merged = {**existing.data, **patch}
            if check is not None:
                verdict = check(merged)
                if not verdict.success:
                    return verdict
            return self.write(name, merged)

    def delete(self, name: str) -> FileOperation:
        if not usable_name(name):
            return FileOperation.fail(FailureKind.NOT_FOUND, _NOT_FOUND)
        path = self.path_for(name)
        with self._locks.held(path.name):
            if not path.is_file():
                return FileOperation.fail(FailureKind.NOT_FOUND, _NOT_FOUND)
            try:
                self._backup(path)
                path.unlink()
            except OSError as e:
                logger.error("DELETE %s failed: %r", path.name, e)
                return FileOperation.fail(FailureKind.IO_FAILURE, f"Failed to delete file: {e}")
        logger.info("DELETE %s", path.name)
        return FileOperation.ok()

    def list(self) -> FileOperation:
        try:
            self._ensure_directories()
            names = [
                p.name[: -len(JSON_EXTENSION)]
                for p in self._data_dir.iterdir()
                if p.name.endswith(JSON_EXTENSION) and usable_name(p.name) and p.is_file()
            ]
        except OSError as e:
            logger.error("LIST %s failed: %r", self._data_dir, e)
            return FileOperation.fail(FailureKind.IO_FAILURE, f"Failed to list files: {e}")
        return FileOperation.ok(names)

    def exists(self, name: str) -> bool:
        return usable_name(name) and self.path_for(name).is_file()
