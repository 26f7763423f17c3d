"""
Error taxonomy for the Cash Card API.

Every failure a client can observe is one of these classes. Routers never
build HTTP error responses by hand: the handlers registered in
``cashcard.app`` translate them using ``status_code``.
"""

from __future__ import annotations


class CashCardError(Exception):
    """Base class for client-facing failures."""

    status_code = 500
    code = "internal"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.code}


class BadRequestError(CashCardError):
    """Malformed input: amount, page, size, sort or id."""

    status_code = 400
    code = "bad_request"


class UnauthenticatedError(CashCardError):
    """Missing or invalid credentials."""

    status_code = 401
    code = "unauthenticated"


class ForbiddenError(CashCardError):
    """Authenticated principal lacks the role required for the resource."""

    status_code = 403
    code = "forbidden"


class NotFoundError(CashCardError):
    """
    The record does not exist or belongs to another principal.

    Both cases share this class and an empty response body.
    """

    status_code = 404
    code = "not_found"
