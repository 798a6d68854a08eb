from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from errors import ApiError, FailureKind
from persistence.auth_state import SessionRecord

from .dependencies import get_schemas, read_json_body, require_session

router = APIRouter(tags=["schemas"])
logger = logging.getLogger(__name__)


@router.get("/api/schemas")
async def list_schemas(request: Request):
    result = await asyncio.to_thread(get_schemas(request).list_schemas)
    if not result.success:
        raise ApiError.from_result(result)
    return {"schemas": result.data}


@router.get("/api/schema/{name:path}")
async def read_schema(name: str, request: Request):
    schema = get_schemas(request).get_schema(name)
    if schema is None:
        raise ApiError(FailureKind.NOT_FOUND, "Schema not found")
    return JSONResponse(schema)


@router.post("/api/schema/{name:path}")
async def save_schema(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    body = await read_json_body(request)
    schema = body.get("schema")
    if schema is None:
        raise ApiError(FailureKind.BAD_REQUEST, "Schema is required")

    result = await asyncio.to_thread(get_schemas(request).save_schema, name, schema)
    if not result.success:
        raise ApiError.from_result(result)
    logger.info("SCHEMA saved name=%s by=%s", name, session.username)
    return {"success": True, "schema": result.data}


@router.delete("/api/schema/{name:path}")
async def delete_schema(name: str, request: Request, session: SessionRecord = Depends(require_session)):
    result = await asyncio.to_thread(get_schemas(request).delete_schema, name)
    if not result.success:
        raise ApiError.from_result(result)
    logger.info("SCHEMA deleted name=%s by=%s", name, session.username)
    return {"success": True}
