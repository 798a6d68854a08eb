from __future__ import annotations

import logging
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth_manager import AuthManager
from errors import ApiError
from persistence.disk_store import DiskDocumentStore
from persistence.paths import ensure_dir
from persistence.repositories import AsyncDocumentRepository
from schema_validator import SchemaValidator
from settings import APP_NAME, APP_VERSION, LiteJsonConfig, Settings, get_settings, load_config

logger = logging.getLogger(__name__)

API_ENDPOINTS = {
    "GET /data/:filename": "Public read access to JSON files",
    "GET /api/file/:filename": "API read access to JSON files",
    "POST /api/file/:filename": "Create or replace JSON file (requires auth)",
    "PUT /api/file/:filename": "Replace JSON file (requires auth)",
    "PATCH /api/file/:filename": "Partially update JSON file (requires auth)",
    "DELETE /api/file/:filename": "Delete JSON file (requires auth)",
    "GET /api/files": "List all available files",
    "POST /api/auth/login": "Login with username/password",
    "POST /api/auth/logout": "Logout and invalidate session",
    "GET /api/auth/status": "Check authentication status",
    "GET /api/schema/:filename": "Get JSON schema",
    "POST /api/schema/:filename": "Create or update schema (requires auth)",
    "DELETE /api/schema/:filename": "Delete schema (requires auth)",
    "GET /api/schemas": "List all available schemas",
    "GET /health": "Health check endpoint",
}


def ensure_directories(config: LiteJsonConfig) -> None:
    for path in (config.data_path, config.schemas_path, config.history_path):
        ensure_dir(path)


def create_app(config: LiteJsonConfig | None = None, settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")

    from endpoints.auth_endpoints import router as auth_router
    from endpoints.file_endpoints import router as file_router
    from endpoints.schema_endpoints import router as schema_router

    settings = settings or get_settings()
    if config is None:
        # Raises ConfigError; callers treat that as fatal.
        config = load_config(settings.config_path)
    ensure_directories(config)

    app = FastAPI(title=APP_NAME, version=APP_VERSION)

    app.state.settings = settings
    app.state.config = config
    app.state.auth = AuthManager(config)
    app.state.documents = AsyncDocumentRepository(DiskDocumentStore(config.data_path, config.history_path))
    app.state.schemas = SchemaValidator(config.schemas_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(exc.to_body(), status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": APP_VERSION,
        }

    @app.get("/")
    async def api_info():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "description": "A lightweight, self-hosted, JSON-based backend for static sites",
            "endpoints": API_ENDPOINTS,
        }

    app.include_router(auth_router)
    app.include_router(file_router)
    app.include_router(schema_router)

    logger.info(
        "LiteJSON ready: data=%s schemas=%s history=%s admin=%s",
        config.data_path,
        config.schemas_path,
        config.history_path,
        config.admin.username,
    )
    return app
