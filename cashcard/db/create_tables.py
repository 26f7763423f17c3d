"""
Create (or recreate) the cash card schema.

Uso:
  python -m cashcard.db.create_tables [--drop]
"""
from __future__ import annotations

import argparse
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)


def create_all(engine: Engine | None = None, *, drop_first: bool = False) -> None:
    engine = engine or get_engine()
    if drop_first:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


def main() -> None:
    ap = argparse.ArgumentParser(description="Create the cash_card table")
    ap.add_argument("--drop", action="store_true", help="drop existing tables first (destroys data)")
    args = ap.parse_args()
    create_all(drop_first=args.drop)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        main()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
