"""The cash card entity as seen by services and routers."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

# Ids are signed 64-bit in every backend; autoincrement starts at 1.
CARD_ID_MIN = 1
CARD_ID_MAX = 2**63 - 1


def is_storable_id(card_id: int) -> bool:
    return CARD_ID_MIN <= card_id <= CARD_ID_MAX


@dataclass(frozen=True)
class CashCard:
    id: Optional[int]
    amount: Decimal
    owner: str
