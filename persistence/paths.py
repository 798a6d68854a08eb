from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath, PureWindowsPath

JSON_EXTENSION = ".json"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_name(name: str, extension: str = JSON_EXTENSION) -> str:
    """
    Turn a user-supplied logical name into a safe filename with exactly one extension.

    Directory components are dropped (both / and \\ separators), unsafe characters
    become "_", and an existing extension suffix is not doubled.
    """
    base = PureWindowsPath(PurePosixPath(name).name).name
    safe = _UNSAFE_CHARS_RE.sub("_", base)
    if safe.lower().endswith(extension.lower()):
        safe = safe[: -len(extension)]
    return f"{safe}{extension}"


def logical_name(name: str, extension: str = JSON_EXTENSION) -> str:
    """Sanitized name without its extension; used for listing and permission lookups."""
    return sanitize_name(name, extension)[: -len(extension)]


def usable_name(name: str, extension: str = JSON_EXTENSION) -> bool:
    """False when the sanitized stem is empty or would produce a hidden file."""
    stem = logical_name(name, extension)
    return bool(stem) and not stem.startswith(".")


def backup_timestamp(now: datetime | None = None) -> str:
    ts = now or datetime.now(timezone.utc)
    iso = ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return iso.replace(":", "-").replace(".", "-")


def backup_path(history_dir: Path, filename: str, now: datetime | None = None) -> Path:
    """
    Return a fresh backup path <filename>.<timestamp> inside history_dir.

    A counter suffix is added if the timestamp already has a backup, so each
    mutation produces its own entry.
    """
    candidate = history_dir / f"{filename}.{backup_timestamp(now)}"
    counter = 1
    unique = candidate
    while unique.exists():
        unique = candidate.with_name(f"{candidate.name}-{counter}")
        counter += 1
    return unique
