"""Cash card wire models. Field names ``id``, ``amount``, ``owner`` are a compatibility surface."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from cashcard.domain.cash_card import CashCard
from cashcard.domain.money import amount_to_wire, parse_amount


class CashCardPayload(BaseModel):
    """Body of create and update requests. Client ``id``/``owner`` are dropped."""

    model_config = ConfigDict(extra="ignore")

    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v: object) -> Decimal:
        return parse_amount(v)


class CashCardView(BaseModel):
    id: int
    amount: Decimal
    owner: str

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return amount_to_wire(amount)

    @classmethod
    def from_card(cls, card: CashCard) -> "CashCardView":
        return cls(id=card.id, amount=card.amount, owner=card.owner)
