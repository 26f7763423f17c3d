"""
Owner-scoped cash card use cases.

Every method takes the authenticated principal explicitly and scopes the
store call to ``principal.name``. A card owned by someone else is reported
exactly like a card that does not exist.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from cashcard.core.errors import NotFoundError
from cashcard.domain.cash_card import CashCard
from cashcard.domain.paging import PageRequest
from cashcard.repositories.sql_repository import CashCardRepository
from cashcard.services.identity_service import AuthenticatedPrincipal

logger = logging.getLogger(__name__)


class CashCardNotFoundError(NotFoundError):
    """No card with this id for the calling principal."""


class CashCardService:
    def __init__(self, repository: CashCardRepository | None = None) -> None:
        self.repository = repository or CashCardRepository()

    def create(self, principal: AuthenticatedPrincipal, amount: Decimal) -> CashCard:
        card = self.repository.create(CashCard(id=None, amount=amount, owner=principal.name))
        logger.info("Cash card created", extra={"owner": principal.name, "card_id": card.id})
        return card

    def find(self, principal: AuthenticatedPrincipal, card_id: int) -> CashCard:
        card = self.repository.get_by_id_and_owner(card_id, principal.name)
        if card is None:
            raise CashCardNotFoundError("Cash card not found")
        return card

    def list(self, principal: AuthenticatedPrincipal, page_request: PageRequest) -> list[CashCard]:
        return self.repository.list_by_owner(principal.name, page_request)

    def update(self, principal: AuthenticatedPrincipal, card_id: int, amount: Decimal) -> CashCard:
        """Full replacement: id kept, owner re-asserted to the caller."""
        self._require_owned(principal, card_id)
        replacement = CashCard(id=card_id, amount=amount, owner=principal.name)
        if not self.repository.update(replacement):
            # deleted between the ownership check and the write
            raise CashCardNotFoundError("Cash card not found")
        logger.info("Cash card updated", extra={"owner": principal.name, "card_id": card_id})
        return replacement

    def delete(self, principal: AuthenticatedPrincipal, card_id: int) -> None:
        self._require_owned(principal, card_id)
        self.repository.delete_by_id(card_id)
        logger.info("Cash card deleted", extra={"owner": principal.name, "card_id": card_id})

    def _require_owned(self, principal: AuthenticatedPrincipal, card_id: int) -> None:
        if not self.repository.exists_by_id_and_owner(card_id, principal.name):
            raise CashCardNotFoundError("Cash card not found")
