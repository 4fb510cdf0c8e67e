from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for every failure a handler turns into an error envelope."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(AppError):
    """Raised when the store connection string is missing."""

    status_code = 500


class NotFoundError(AppError):
    status_code = 404


class ValidationError(AppError):
    status_code = 400


class StoreError(AppError):
    """Unexpected failure from the persistence layer."""

    status_code = 500


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Turn any persistence failure inside the block into a StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(message)
        raise StoreError(message, details=str(e)) from e


def ok(data: Any, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def fail(error: str, details: Optional[Any] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body
