from __future__ import annotations

import threading
from typing import Protocol

from pydantic import BaseModel


class SessionRecord(BaseModel):
    username: str
    authenticated: bool = True
    created_at: float


class SessionStateRepository(Protocol):
    def get_session(self, session_id: str) -> SessionRecord | None:
        ...

    def put_session(self, session_id: str, record: SessionRecord) -> None:
        ...

    def delete_session(self, session_id: str) -> None:
        ...


class InMemorySessionStateRepository(SessionStateRepository):
    """
    Process-local session map (session_id -> SessionRecord).

    Sessions are intentionally ephemeral: nothing survives a restart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, SessionRecord] = {}

    def get_session(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            return self._sessions.get(session_id)

    def put_session(self, session_id: str, record: SessionRecord) -> None:
        with self._lock:
            self._sessions[session_id] = record

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
