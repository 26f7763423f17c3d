"""Fixture cards matching the original demo data set."""
from __future__ import annotations

from decimal import Decimal

from cashcard.domain.cash_card import CashCard
from cashcard.repositories.sql_repository import CashCardRepository

SEED_CARDS = (
    CashCard(id=99, amount=Decimal("123.45"), owner="sarah1"),
    CashCard(id=100, amount=Decimal("1.00"), owner="sarah1"),
    CashCard(id=101, amount=Decimal("150.00"), owner="sarah1"),
    CashCard(id=102, amount=Decimal("200.00"), owner="kumar2"),
)


def seed_cards(repository: CashCardRepository, cards=SEED_CARDS) -> list[CashCard]:
    """Insert the cards whose id is still free; returns those inserted."""
    inserted = []
    for card in cards:
        if repository.get_by_id(card.id) is not None:
            continue
        inserted.append(repository.insert_with_id(card))
    return inserted
