"""Pydantic wire models."""

from .cash_card import CashCardPayload, CashCardView

__all__ = ["CashCardPayload", "CashCardView"]
