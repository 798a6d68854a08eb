from __future__ import annotations

from typing import Any, Callable, Protocol

from errors import FileOperation

MergeCheck = Callable[[Any], FileOperation]


class DocumentStore(Protocol):
    """
    Named JSON documents, one per logical name. Every method reports failures
    through the returned FileOperation rather than raising.
    """

    def read(self, name: str) -> FileOperation:
        """Return the parsed document (NOT_FOUND / IO_FAILURE otherwise)."""
        ...

    def write(self, name: str, document: Any) -> FileOperation:
        """Back up any previous content, then atomically replace the document."""
        ...

    def merge(self, name: str, patch: dict[str, Any], check: MergeCheck | None = None) -> FileOperation:
        """Shallow-merge patch over the existing object document and write the result."""
        ...

    def delete(self, name: str) -> FileOperation:
        ...

    def list(self) -> FileOperation:
        ...

    def exists(self, name: str) -> bool:
        ...
