#!/usr/bin/env python3
"""
Carregar os cartoes de demonstracao (ids 99-102) no banco configurado.

Uso:
  python scripts/seed_cards.py [--create-schema]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Garante que o pacote cashcard seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cashcard.db.create_tables import create_all  # noqa: E402
from cashcard.db.seed import seed_cards  # noqa: E402
from cashcard.repositories.sql_repository import CashCardRepository  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed demo cash cards")
    ap.add_argument("--create-schema", action="store_true", help="create tables before seeding")
    args = ap.parse_args()

    if args.create_schema:
        create_all()
    inserted = seed_cards(CashCardRepository())
    print(f"OK: {len(inserted)} cartoes inseridos")
    for card in inserted:
        print(f"  #{card.id} {card.amount} ({card.owner})")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
