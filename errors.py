from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    IO_FAILURE = "io_failure"
    PAYLOAD_TOO_LARGE = "payload_too_large"


STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.NOT_FOUND: 404,
    FailureKind.VALIDATION_FAILED: 400,
    FailureKind.BAD_REQUEST: 400,
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.IO_FAILURE: 500,
    FailureKind.PAYLOAD_TOO_LARGE: 413,
}


@dataclass(frozen=True)
class FileOperation:
    """Outcome of a store or schema operation; failures never escape as exceptions."""

    success: bool
    data: Any = None
    error: str | None = None
    failure: FailureKind | None = None
    details: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Any = None) -> "FileOperation":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, failure: FailureKind, error: str, details: list[str] | None = None) -> "FileOperation":
        return cls(success=False, error=error, failure=failure, details=list(details or []))


class ApiError(Exception):
    """Raised by endpoints; rendered by the app as {error, details?}."""

    def __init__(self, kind: FailureKind, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = list(details) if details else None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body

    @classmethod
    def from_result(cls, result: FileOperation) -> "ApiError":
        kind = result.failure or FailureKind.IO_FAILURE
        return cls(kind, result.error or "Operation failed", result.details)
