from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from errors import ApiError, FailureKind
from persistence.auth_state import SessionRecord

from .dependencies import (
    ensure_readable,
    get_auth,
    get_documents,
    get_schemas,
    optional_session,
    read_json_body,
    require_session,
)

router = APIRouter(tags=["files"])
logger = logging.getLogger(__name__)


async def _serve_document(request: Request, name: str, authenticated: bool) -> JSONResponse:
    ensure_readable(get_auth(request), name, authenticated)
    result = await get_documents(request).read(name)
    if not result.success:
        raise ApiError.from_result(result)
    return JSONResponse(result.data)


async def _payload(request: Request) -> Any:
    body = await read_json_body(request)
    data = body.get("data")
    if data is None:
        raise ApiError(FailureKind.BAD_REQUEST, "Data is required")
    return data


# -------------------------------------------------------------------
# Public read path
# -------------------------------------------------------------------
@router.get("/data/{name:path}")
async def public_read(name: str, request: Request, authenticated: bool = Depends(optional_session)):
    return await _serve_document(request, name, authenticated)


# -------------------------------------------------------------------
# API
# -------------------------------------------------------------------
@router.get("/api/files")
async def list_files(request: Request):
    result = await get_documents(request).list()
    if not result.success:
        raise ApiError.from_result(result)
    return {"files": result.data}


@router.get("/api/file/{name:path}")
async def read_file(name: str, request: Request, authenticated: bool = Depends(optional_session)):
    return await _serve_document(request, name, authenticated)


async def _replace(name: str, request: Request) -> dict[str, Any]:
    data = await _payload(request)

    validation = get_schemas(request).validate(name, data)
    if not validation.success:
        raise ApiError.from_result(validation)

    result = await get_documents(request).write(name, data)
    if not result.success:
        raise ApiError.from_result(result)
    return {"success": True, "data": result.data}


@router.post("/api/file/{name:path}")
async def create_file(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    return await _replace(name, request)


@router.put("/api/file/{name:path}")
async def replace_file(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    return await _replace(name, request)


@router.patch("/api/file/{name:path}")
async def patch_file(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    patch = await _payload(request)
    if not isinstance(patch, dict):
        raise ApiError(FailureKind.BAD_REQUEST, "Partial updates require a JSON object")

    schemas = get_schemas(request)
    # Validation runs on the merged document, not the patch alone.
    result = await get_documents(request).merge(name, patch, lambda merged: schemas.validate(name, merged))
    if not result.success:
        raise ApiError.from_result(result)
    return {"success": True, "data": result.data}


@router.delete("/api/file/{name:path}")
async def delete_file(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    result = await get_documents(request).delete(name)
    if not result.success:
        raise ApiError.from_result(result)
    return {"success": True}
