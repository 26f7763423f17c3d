"""
Amount parsing and wire conversion.

Amounts live as ``Decimal`` with two fractional digits everywhere inside the
service. Conversion happens only at the edges: ``parse_amount`` for incoming
payloads and ``amount_to_wire`` when serializing JSON.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

AMOUNT_SCALE = 2
AMOUNT_MAX_DIGITS = 15
_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)


def parse_amount(value: object) -> Decimal:
    """
    Convert a JSON-decoded value (number or numeric string) into a Decimal.

    Floats go through ``repr`` so that 123.45 becomes Decimal("123.45") and
    not its binary expansion. Raises ValueError on anything malformed.
    """
    if value is None:
        raise ValueError("amount is required")
    if isinstance(value, bool):
        raise ValueError("amount must be a number")
    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, (int, float)):
        candidate = _to_decimal(repr(value))
    elif isinstance(value, str):
        candidate = _to_decimal(value.strip())
    else:
        raise ValueError("amount must be a number")

    if not candidate.is_finite():
        raise ValueError("amount must be finite")
    if candidate and candidate.adjusted() >= AMOUNT_MAX_DIGITS - AMOUNT_SCALE:
        raise ValueError(f"amount supports at most {AMOUNT_MAX_DIGITS} digits")
    normalized = candidate.quantize(_QUANTUM)
    if normalized != candidate:
        raise ValueError(f"amount supports at most {AMOUNT_SCALE} decimal places")
    return normalized


def _to_decimal(text: str) -> Decimal:
    if not text:
        raise ValueError("amount is required")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"amount is not numeric: {text!r}") from exc


def amount_to_wire(amount: Decimal) -> float:
    """JSON number for an amount; exact for up to AMOUNT_MAX_DIGITS digits."""
    return float(amount)
