"""
Error taxonomy shared by the gateway client and the views.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    validation = "validation"
    unauthorized = "unauthorized"
    not_found = "not_found"
    client_error = "client_error"
    server_error = "server_error"
    connectivity = "connectivity"
    request_setup = "request_setup"
    unclassified = "unclassified"


class ApiError(Exception):
    """
    A classified failure of a backend call.

    Attributes:
        kind: ErrorKind the failure was classified into
        status_code: HTTP status when the backend answered, else None
        body: Decoded response body when the backend answered, else None
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url

    def __repr__(self) -> str:
        return (
            f"ApiError(kind={self.kind!s}, status_code={self.status_code}, "
            f"method={self.method}, url={self.url})"
        )


class FormValidationError(Exception):
    """Raised when form input fails validation before any request is made."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__("Form validation failed")
        self.field_errors = field_errors
