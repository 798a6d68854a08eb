from __future__ import annotations

from .auth_state import InMemorySessionStateRepository, SessionRecord, SessionStateRepository
from .disk_store import DiskDocumentStore
from .interfaces import DocumentStore
from .repositories import AsyncDocumentRepository

__all__ = [
    "SessionRecord",
    "SessionStateRepository",
    "InMemorySessionStateRepository",
    "DocumentStore",
    "DiskDocumentStore",
    "AsyncDocumentRepository",
]
