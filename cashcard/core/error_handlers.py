"""
Global exception handlers.

- CashCardError: status from the class; 404 has an empty body, 401 carries
  the Basic challenge
- RequestValidationError: 400 with field-level messages
- SQLAlchemyError: 500, never leaks internals and is never turned into a 404
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .errors import CashCardError, NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="cashcard"'}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CashCardError, _cash_card_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)


async def _cash_card_error_handler(request: Request, exc: CashCardError):
    extra = {"error_code": exc.code, "path": request.url.path}
    if isinstance(exc, NotFoundError):
        logger.debug(exc.message, extra=extra)
        return Response(status_code=exc.status_code)
    logger.info("%s: %s", type(exc).__name__, exc.message, extra=extra)
    headers = BASIC_CHALLENGE if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    logger.info("Validation error on %s: %s", request.url.path, errors, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "code": "bad_request", "errors": errors},
    )


async def _store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s", request.url.path, exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "code": "internal"},
    )
