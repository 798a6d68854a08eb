from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any:
    """
    Read and parse a JSON file.

    Raises FileNotFoundError for missing files and ValueError for invalid JSON;
    callers decide how to surface either.
    """
    raw = path.read_text(encoding="utf-8")
    return parse_json(raw)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def parse_json(raw: str | bytes) -> Any:
    """Parse strict JSON: NaN, Infinity and -Infinity are rejected with ValueError."""
    return json.loads(raw, parse_constant=_reject_constant)


def temp_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a sibling temp file then replacing.

    The final path only ever holds the previous or the new content. If anything
    fails after the temp file was created, it is removed on a best-effort basis.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = temp_path_for(path)
    # NaN and Infinity are not JSON; refuse them before anything touches disk.
    text = json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False, allow_nan=False)
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
        tmp_path.replace(path)
    except BaseException:
        _discard_temp(tmp_path)
        raise


def _discard_temp(tmp_path: Path) -> None:
    try:
        tmp_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to clean up temp file %s: %r", tmp_path, e)
