# auth_endpoints.py
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from auth_manager import SESSION_COOKIE_NAME, session_tokens
from errors import ApiError, FailureKind

from .dependencies import get_app_settings, get_auth, read_json_body

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login")
async def login(request: Request) -> JSONResponse:
    body = await read_json_body(request)
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ApiError(FailureKind.BAD_REQUEST, "Username and password are required")

    auth = get_auth(request)
    # bcrypt is deliberately slow; keep it off the event loop.
    if not await asyncio.to_thread(auth.authenticate, username, password):
        logger.warning("LOGIN failed for username=%s", username)
        raise ApiError(FailureKind.UNAUTHORIZED, "Invalid credentials")

    sid = auth.create_session(username)
    logger.info("LOGIN ok username=%s", username)

    resp = JSONResponse({"success": True, "message": "Login successful", "sessionId": sid})
    resp.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sid,
        max_age=auth.ttl_seconds,
        httponly=True,
        samesite="strict",
        secure=get_app_settings(request).cookie_secure,
        path="/",
    )
    return resp


@router.post("/logout")
async def logout(request: Request) -> JSONResponse:
    auth = get_auth(request)
    tokens = session_tokens(request)
    for sid in tokens:
        auth.invalidate_session(sid)
    if tokens:
        logger.info("LOGOUT")
    resp = JSONResponse({"success": True, "message": "Logout successful"})
    resp.delete_cookie(key=SESSION_COOKIE_NAME, path="/", httponly=True, samesite="strict")
    return resp


@router.get("/status")
async def status(request: Request) -> JSONResponse:
    return JSONResponse({"authenticated": get_auth(request).session_for_request(request) is not None})
