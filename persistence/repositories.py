from __future__ import annotations

import asyncio
from typing import Any

from errors import FileOperation

from .interfaces import DocumentStore, MergeCheck


class AsyncDocumentRepository:
    """
    Async wrapper around a document store.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def read(self, name: str) -> FileOperation:
        return await asyncio.to_thread(self._store.read, name)

    async def write(self, name: str, document: Any) -> FileOperation:
        return await asyncio.to_thread(self._store.write, name, document)

    async def merge(self, name: str, patch: dict[str, Any], check: MergeCheck | None = None) -> FileOperation:
        return await asyncio.to_thread(self._store.merge, name, patch, check)

    async def delete(self, name: str) -> FileOperation:
        return await asyncio.to_thread(self._store.delete, name)

    async def list(self) -> FileOperation:
        return await asyncio.to_thread(self._store.list)

    async def exists(self, name: str) -> bool:
        return await asyncio.to_thread(self._store.exists, name)
