"""FastAPI exception handlers for typed errors.

This module maps typed errors onto HTTP responses using only their resolved
status code and message, and provides a fallback for everything else.

Design:
- TypedError subclasses -> their status code (400, 403, 404, 409, 500, 204)
- Exceptions raised ``from`` a typed error -> handled as that typed error
- Anything else -> generic 500 (safety net)
- Causes and stacks are logged, never sent to clients

Requires the ``fastapi`` extra.
"""

import logging
from http import HTTPStatus

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from typed_errors.core.accessors import get_code
from typed_errors.core.errors import TypedError, find
from typed_errors.core.logging import log_error

logger = logging.getLogger(__name__)


def _public_message(exc: TypedError, status_code: int) -> str:
    if exc.message:
        return exc.message
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def typed_error_handler(request: Request, exc: TypedError) -> Response:
    """Handle typed errors with a consistent JSON format.

    All responses (except 204) carry:
    - error.category: Category name
    - error.code: Resolved status code
    - error.message: The error's message, or the status phrase when empty

    Args:
        request: FastAPI request object.
        exc: TypedError instance (or subclass).

    Returns:
        Response with the error's status code.
    """
    status_code = get_code(exc)

    log_error(
        logger,
        exc,
        "typed_error_handled",
        status_code=status_code,
        request_path=request.url.path,
        request_method=request.method,
    )

    if status_code == HTTPStatus.NO_CONTENT:
        return Response(status_code=status_code)

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "category": exc.category.value,
                "code": status_code,
                "message": _public_message(exc, status_code),
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Fallback handler for unexpected errors (safety net).

    Exceptions chained onto a typed error are answered as that typed error.
    Anything else gets a generic 500 without implementation details.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        Response for the typed error on the chain, or a generic 500.
    """
    typed = find(exc, TypedError)
    if typed is not None:
        return await typed_error_handler(request, typed)

    log_error(
        logger,
        exc,
        "unhandled_exception",
        request_path=request.url.path,
        request_method=request.method,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "category": "internal",
                "code": 500,
                "message": "An unexpected error occurred. Please try again later.",
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register the typed-error and fallback handlers with a FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from typed_errors.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(TypedError)(typed_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
