from __future__ import annotations

from typing import Any, Dict, Optional

from .contracts import ErrorDetail


class KVStoreError(Exception):
    """Base error for KVStore component."""

    code: str = "kvstore.internal_error"
    status: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.message)
        self.details = details

    def detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=str(self), details=self.details)


class AlreadyExistsError(KVStoreError):
    """Raised by create when the key is already present."""

    code = "kvstore.already_exists"
    status = 409
    message = "Resource already exists"


class NotFoundError(KVStoreError):
    """Raised by read/delete when the key is absent."""

    code = "kvstore.not_found"
    status = 404
    message = "No value found"


class InvalidValueError(KVStoreError):
    """Raised when a request body does not decode to a JSON value."""

    code = "kvstore.invalid_value"
    status = 400
    message = "Invalid request body"


class InvalidKeyError(KVStoreError):
    code = "kvstore.invalid_key"
    status = 400
    message = "Required param key is empty"


class UnsupportedMethodError(KVStoreError):
    code = "kvstore.unsupported_method"
    status = 405
    message = "Unsupported method"
