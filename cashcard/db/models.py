"""SQLAlchemy models for the cash card store."""
from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, Numeric, String

from .session import Base

# SQLite only autoincrements a column declared exactly INTEGER PRIMARY KEY.
CardId = BigInteger().with_variant(Integer, "sqlite")


class CashCardRecord(Base):
    __tablename__ = "cash_card"

    id = Column(CardId, primary_key=True, autoincrement=True)
    amount = Column(Numeric(15, 2, asdecimal=True), nullable=False)
    owner = Column(String(256), nullable=False, index=True)
