"""Cash card store backed by SQLAlchemy."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, select, update

from cashcard.db.models import CashCardRecord
from cashcard.db.session import SessionFactory, get_session
from cashcard.domain.cash_card import CashCard, is_storable_id
from cashcard.domain.paging import PageRequest

_SORT_COLUMNS = {
    "id": CashCardRecord.id,
    "amount": CashCardRecord.amount,
    "owner": CashCardRecord.owner,
}


def _entity_to_card(entity: CashCardRecord) -> CashCard:
    return CashCard(id=entity.id, amount=entity.amount, owner=entity.owner)


class CashCardRepository:
    """CRUD helpers wrapping the SQLAlchemy session. One session per call."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session = session_factory

    def create(self, card: CashCard) -> CashCard:
        """Persist a new card; the id is always assigned by the database."""
        entity = CashCardRecord(amount=card.amount, owner=card.owner)
        with self._session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _entity_to_card(entity)

    def insert_with_id(self, card: CashCard) -> CashCard:
        """Persist a card with a caller-chosen id (fixtures and seeding only)."""
        if card.id is None or not is_storable_id(card.id):
            raise ValueError(f"insert_with_id requires an id in [1, 2**63 - 1], got {card.id!r}")
        entity = CashCardRecord(id=card.id, amount=card.amount, owner=card.owner)
        with self._session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _entity_to_card(entity)

    def get_by_id(self, card_id: int) -> Optional[CashCard]:
        if not is_storable_id(card_id):
            return None
        with self._session() as session:
            entity = session.get(CashCardRecord, card_id)
            return _entity_to_card(entity) if entity else None

    def get_by_id_and_owner(self, card_id: int, owner: str) -> Optional[CashCard]:
        if not is_storable_id(card_id):
            return None
        with self._session() as session:
            stmt = select(CashCardRecord).where(
                CashCardRecord.id == card_id,
                CashCardRecord.owner == owner,
            )
            entity = session.execute(stmt).scalar_one_or_none()
            return _entity_to_card(entity) if entity else None

    def exists_by_id_and_owner(self, card_id: int, owner: str) -> bool:
        if not is_storable_id(card_id):
            return False
        with self._session() as session:
            stmt = (
                select(CashCardRecord.id)
                .where(CashCardRecord.id == card_id, CashCardRecord.owner == owner)
                .limit(1)
            )
            return session.execute(stmt).first() is not None

    def list_by_owner(self, owner: str, page_request: PageRequest) -> list[CashCard]:
        if page_request.beyond_range:
            return []
        order_by = []
        for order in page_request.orders():
            column = _SORT_COLUMNS[order.property]
            order_by.append(column.desc() if order.descending else column.asc())
        stmt = (
            select(CashCardRecord)
            .where(CashCardRecord.owner == owner)
            .order_by(*order_by)
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        with self._session() as session:
            return [_entity_to_card(entity) for entity in session.execute(stmt).scalars().all()]

    def update(self, card: CashCard) -> bool:
        """
        Replace amount and owner of an existing row keyed by id.

        Never inserts. Returns False when no row with that id exists anymore.
        """
        if card.id is None or not is_storable_id(card.id):
            return False
        with self._session() as session:
            stmt = (
                update(CashCardRecord)
                .where(CashCardRecord.id == card.id)
                .values(amount=card.amount, owner=card.owner)
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount > 0

    def delete_by_id(self, card_id: int) -> None:
        if not is_storable_id(card_id):
            return
        with self._session() as session:
            session.execute(delete(CashCardRecord).where(CashCardRecord.id == card_id))
            session.commit()
