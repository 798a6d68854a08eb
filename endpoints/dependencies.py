from __future__ import annotations

import logging
from typing import Any

from fastapi import Request

from auth_manager import AuthManager, session_tokens
from errors import ApiError, FailureKind
from json_store import parse_json
from persistence.auth_state import SessionRecord
from persistence.repositories import AsyncDocumentRepository
from schema_validator import SchemaValidator
from settings import Settings

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Components (created once by create_app and kept on app.state)
# -------------------------------------------------------------------
def get_auth(request: Request) -> AuthManager:
    return request.app.state.auth


def get_documents(request: Request) -> AsyncDocumentRepository:
    return request.app.state.documents


def get_schemas(request: Request) -> SchemaValidator:
    return request.app.state.schemas


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# -------------------------------------------------------------------
# Auth gates
# -------------------------------------------------------------------
def _current_session(request: Request) -> SessionRecord | None:
    session = get_auth(request).session_for_request(request)
    if get_app_settings(request).debug_log_requests:
        logger.info(
            "REQUEST %s %s session_present=%s authenticated=%s",
            request.method,
            request.url.path,
            bool(session_tokens(request)),
            session is not None,
        )
    return session


async def require_session(request: Request) -> SessionRecord:
    session = _current_session(request)
    if session is None:
        raise ApiError(FailureKind.UNAUTHORIZED, "Authentication required")
    return session


async def optional_session(request: Request) -> bool:
    authenticated = _current_session(request) is not None
    request.state.is_authenticated = authenticated
    return authenticated


def ensure_readable(auth: AuthManager, name: str, authenticated: bool) -> None:
    """Admin-flagged documents need a valid session on every read path."""
    if auth.requires_admin(name) and not authenticated:
        raise ApiError(FailureKind.UNAUTHORIZED, "Authentication required")


# -------------------------------------------------------------------
# Request bodies
# -------------------------------------------------------------------
def _too_large(limit: int) -> ApiError:
    return ApiError(FailureKind.PAYLOAD_TOO_LARGE, f"Request body exceeds {limit} bytes")


async def read_json_body(request: Request) -> dict[str, Any]:
    limit = get_app_settings(request).max_body_bytes
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise _too_large(limit)

    raw = await request.body()
    if len(raw) > limit:
        raise _too_large(limit)
    if not raw.strip():
        return {}
    try:
        data = parse_json(raw)
    except ValueError:
        raise ApiError(FailureKind.BAD_REQUEST, "Invalid JSON body")
    if not isinstance(data, dict):
        raise ApiError(FailureKind.BAD_REQUEST, "Request body must be a JSON object")
    return data
