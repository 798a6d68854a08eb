from __future__ import annotations

import hmac
import logging
import secrets
import time
from typing import Callable, Mapping

import bcrypt
from fastapi import Request

from persistence.auth_state import InMemorySessionStateRepository, SessionRecord, SessionStateRepository
from persistence.paths import logical_name
from settings import LiteJsonConfig

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "sessionId"
SESSION_TTL_SECONDS = 24 * 60 * 60
DEFAULT_HASH_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_HASH_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Configured admin password hash is not a valid bcrypt hash")
        return False


def session_tokens(request: Request) -> list[str]:
    """Candidate session tokens: the cookie first, then an Authorization: Bearer header."""
    tokens: list[str] = []
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if sid:
        tokens.append(sid)
    auth = request.headers.get("Authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


class AuthManager:
    """
    Single-admin authentication with opaque, lazily expiring sessions.

    A session older than the TTL is evicted the first time it is checked;
    there is no background sweep.
    """

    def __init__(
        self,
        config: LiteJsonConfig,
        sessions: SessionStateRepository | None = None,
        *,
        ttl_seconds: int = SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._admin = config.admin
        self._permissions: Mapping[str, str] = {
            logical_name(name): level for name, level in config.permissions.items()
        }
        self._sessions = sessions if sessions is not None else InMemorySessionStateRepository()
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def authenticate(self, username: str, password: str) -> bool:
        # Always pay for the hash check so a wrong username costs the same as a wrong password.
        password_ok = verify_password(password, self._admin.password_hash)
        username_ok = hmac.compare_digest(username.encode("utf-8"), self._admin.username.encode("utf-8"))
        return username_ok and password_ok

    def create_session(self, username: str) -> str:
        sid = secrets.token_urlsafe(32)
        self._sessions.put_session(sid, SessionRecord(username=username, created_at=self._clock()))
        return sid

    def get_session(self, session_id: str | None) -> SessionRecord | None:
        if not session_id:
            return None
        rec = self._sessions.get_session(session_id)
        if rec is None:
            return None
        if self._clock() - rec.created_at > self._ttl:
            self._sessions.delete_session(session_id)
            return None
        return rec if rec.authenticated else None

    def session_for_request(self, request: Request) -> SessionRecord | None:
        # A stale cookie must not shadow a valid bearer token.
        for token in session_tokens(request):
            rec = self.get_session(token)
            if rec is not None:
                return rec
        return None

    def validate_session(self, session_id: str | None) -> bool:
        return self.get_session(session_id) is not None

    def invalidate_session(self, session_id: str | None) -> None:
        if session_id:
            self._sessions.delete_session(session_id)

    def requires_admin(self, name: str) -> bool:
        return self._permissions.get(logical_name(name)) == "admin"
