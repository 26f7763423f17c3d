"""Request dependencies: collaborators from app.state, caller identity, request bodies."""
from __future__ import annotations

import base64
import binascii
import json
from decimal import Decimal
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from pydantic import ValidationError

from cashcard.core.config import Settings
from cashcard.core.errors import BadRequestError, UnauthenticatedError
from cashcard.schemas.cash_card import CashCardPayload
from cashcard.services.cash_card_service import CashCardService
from cashcard.services.identity_service import AuthenticatedPrincipal, IdentityGate

BASIC_SCHEME = "basic"


def basic_credentials(request: Request) -> Optional[HTTPBasicCredentials]:
    """
    Credentials from an ``Authorization: Basic`` header, decoded as UTF-8
    (RFC 7617). None when no Basic credentials were sent; a malformed header
    is an ``UnauthenticatedError``.
    """
    authorization = request.headers.get("Authorization")
    scheme, _, param = (authorization or "").partition(" ")
    if not authorization or scheme.lower() != BASIC_SCHEME:
        return None
    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise UnauthenticatedError("Malformed Basic credentials") from exc
    username, separator, password = decoded.partition(":")
    if not separator:
        raise UnauthenticatedError("Malformed Basic credentials")
    return HTTPBasicCredentials(username=username, password=password)


def _state_attr(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} nao configurado")
    return value


def get_identity_gate(request: Request) -> IdentityGate:
    return _state_attr(request, "identity_gate")


def get_cash_card_service(request: Request) -> CashCardService:
    return _state_attr(request, "cash_card_service")


def get_app_settings(request: Request) -> Settings:
    return _state_attr(request, "settings")


def current_principal(
    credentials: HTTPBasicCredentials | None = Depends(basic_credentials),
    gate: IdentityGate = Depends(get_identity_gate),
) -> AuthenticatedPrincipal:
    """Authenticated principal holding the required role, or 401/403."""
    if credentials is None:
        raise UnauthenticatedError("Authentication required")
    return gate.admit(credentials.username, credentials.password)


async def cash_card_payload(request: Request) -> CashCardPayload:
    """
    Parse the JSON body. Declared after ``current_principal`` in every route
    so that credentials are always checked before the body.

    Floats are decoded straight to Decimal.
    """
    raw = await request.body()
    try:
        data = json.loads(raw or b"", parse_float=Decimal)
    except (ValueError, UnicodeDecodeError) as exc:
        raise BadRequestError("Request body must be valid JSON") from exc
    try:
        return CashCardPayload.model_validate(data)
    except ValidationError as exc:
        raise BadRequestError(_validation_message(exc)) from exc


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"
