# product_service/errors.py

"""
Error kinds raised by the data-access layer.

Nothing here knows about HTTP; ``register_exception_handlers`` is the one
place where an error kind is turned into a status code and a JSON body.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


class ProductServiceError(Exception):
    """Base class for every error the service raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProductServiceError):
    """Input violates one or more field constraints."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Invalid product data")
        self.errors = errors


class NotFoundError(ProductServiceError):
    """No product has the given id, or the id is not well formed."""

    def __init__(self, product_id: Optional[str] = None):
        super().__init__("Product not found")
        self.product_id = product_id


class StorageError(ProductServiceError):
    """The database is unreachable or rejected the operation."""


def format_validation_errors(errors) -> List[str]:
    """Turn pydantic/FastAPI error dicts into ``"<field>: <reason>"`` strings."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        messages.append(f"{field}: {error.get('msg', 'Invalid value')}")
    return messages


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def not_found_error_handler(request: Request, exc: NotFoundError):
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message)


async def storage_error_handler(request: Request, exc: StorageError):
    # The driver error was logged where it happened; keep it out of the body.
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    messages = format_validation_errors(exc.errors())
    logger.warning(
        f"Product Service: Rejected request body for {request.method} {request.url.path}: {messages}"
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request body"
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Product Service: Unhandled error on {request.method} {request.url.path}: {exc}",
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
