#!/usr/bin/env python3
"""
Cadastrar (ou atualizar) um principal no arquivo de registro JSON.

Uso:
  python scripts/add_principal.py --file principals.json --username sarah1 --role CARD-OWNER [--password abc123]
"""
from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

# Garante que o pacote cashcard seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cashcard.services.identity_service import upsert_principal_file  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Provision a principal in the registry file")
    ap.add_argument("--file", required=True, help="registry path (CASHCARD_PRINCIPALS_FILE)")
    ap.add_argument("--username", required=True)
    ap.add_argument("--role", action="append", default=[], help="role/claim; repeatable (ex.: CARD-OWNER)")
    ap.add_argument("--password", help="senha (default: pergunta no terminal)")
    args = ap.parse_args()

    password = args.password or getpass.getpass("Senha: ")
    if not password:
        raise SystemExit("Senha obrigatoria")
    principal = upsert_principal_file(args.file, args.username, password, args.role)
    print("OK: principal cadastrado")
    print(f"  Usuario: {principal.username}")
    print(f"  Roles: {', '.join(sorted(principal.roles)) or '-'}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
