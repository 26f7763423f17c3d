"""
Authentication and authorization of API callers.

The ``IdentityGate`` is built from an explicit ``PrincipalRegistry`` (username
-> Argon2 hash -> roles). It keeps no per-request state: every call either
returns an ``AuthenticatedPrincipal`` or raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Optional

from cashcard.core.config import Settings
from cashcard.core.errors import ForbiddenError, UnauthenticatedError
from cashcard.core.security import hash_password, is_password_hash, verify_password

logger = logging.getLogger(__name__)

# Demo accounts used outside prod when no registry file is configured.
DEMO_PRINCIPALS = (
    ("sarah1", "abc123", ("CARD-OWNER",)),
    ("kumar2", "xyz789", ("CARD-OWNER",)),
    ("hank-owns-no-cards", "def456", ("NON-OWNER",)),
)


class RegistryError(Exception):
    """Raised when the principal registry cannot be loaded."""


@dataclass(frozen=True)
class Principal:
    username: str
    password_hash: str
    roles: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity handed to the service layer; ``name`` is the record owner."""

    name: str
    roles: frozenset[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles


class PrincipalRegistry:
    """Immutable lookup of provisioned principals."""

    def __init__(self, principals: Iterable[Principal]) -> None:
        entries: dict[str, Principal] = {}
        for principal in principals:
            if not principal.username:
                raise RegistryError("principal without username")
            if not is_password_hash(principal.password_hash):
                raise RegistryError(f"principal {principal.username!r} has no argon2 password hash")
            entries[principal.username] = principal
        self._entries: Mapping[str, Principal] = entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, username: object) -> bool:
        return username in self._entries

    def get(self, username: str) -> Optional[Principal]:
        return self._entries.get(username)

    @classmethod
    def from_plaintext(cls, entries: Iterable[tuple[str, str, Iterable[str]]]) -> "PrincipalRegistry":
        """Hash ``(username, password, roles)`` triples; for demos and tests."""
        return cls(
            Principal(username=username, password_hash=hash_password(password), roles=frozenset(roles))
            for username, password, roles in entries
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "PrincipalRegistry":
        file_path = Path(path)
        if not file_path.exists():
            raise RegistryError(f"principal registry not found: {file_path}")
        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RegistryError(f"invalid principal registry {file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise RegistryError(f"invalid principal registry {file_path}: expected an object")
        return cls(_principal_from_json(item) for item in (data.get("principals") or []))


def _principal_from_json(item: Mapping) -> Principal:
    if not isinstance(item, Mapping):
        raise RegistryError("principal entries must be objects")
    return Principal(
        username=str(item.get("username") or "").strip(),
        password_hash=str(item.get("password_hash") or ""),
        roles=frozenset(str(role).strip() for role in (item.get("roles") or []) if str(role).strip()),
    )


def upsert_principal_file(path: str | Path, username: str, password: str, roles: Iterable[str]) -> Principal:
    """Add or replace one principal in a registry file, hashing the password."""
    username = (username or "").strip()
    if not username:
        raise RegistryError("username is required")
    file_path = Path(path)
    data: dict = {"principals": []}
    if file_path.exists():
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    principal = Principal(
        username=username,
        password_hash=hash_password(password),
        roles=frozenset(r.strip() for r in roles if r.strip()),
    )
    entries = [p for p in (data.get("principals") or []) if p.get("username") != username]
    entries.append(
        {"username": principal.username, "password_hash": principal.password_hash, "roles": sorted(principal.roles)}
    )
    data["principals"] = entries
    file_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return principal


def load_registry(settings: Settings) -> PrincipalRegistry:
    """Registry from CASHCARD_PRINCIPALS_FILE, or the demo accounts outside prod."""
    if settings.principals_file:
        registry = PrincipalRegistry.from_file(settings.principals_file)
        logger.info("Loaded %d principals from %s", len(registry), settings.principals_file)
        return registry
    if settings.is_prod:
        raise RegistryError("CASHCARD_PRINCIPALS_FILE must be configured in prod.")
    logger.warning("No principal registry configured; using demo principals")
    return PrincipalRegistry.from_plaintext(DEMO_PRINCIPALS)


class IdentityGate:
    """Validates credentials and role claims for every request."""

    def __init__(self, registry: PrincipalRegistry, required_role: str = "CARD-OWNER") -> None:
        self.registry = registry
        self.required_role = required_role
        # Unknown usernames are checked against this so they cost the same as a wrong password.
        self._dummy_hash = hash_password("cashcard-unknown-principal")

    def authenticate(self, username: Optional[str], password: Optional[str]) -> AuthenticatedPrincipal:
        if not username or password is None:
            raise UnauthenticatedError("Authentication required")
        principal = self.registry.get(username)
        stored = principal.password_hash if principal else self._dummy_hash
        if not verify_password(password, stored) or principal is None:
            logger.warning("Rejected credentials", extra={"username": username})
            raise UnauthenticatedError("Invalid credentials")
        return AuthenticatedPrincipal(name=principal.username, roles=principal.roles)

    def authorize(self, principal: AuthenticatedPrincipal) -> AuthenticatedPrincipal:
        if not principal.has_role(self.required_role):
            logger.info("Principal lacks role %s", self.required_role, extra={"username": principal.name})
            raise ForbiddenError("Access denied")
        return principal

    def admit(self, username: Optional[str], password: Optional[str]) -> AuthenticatedPrincipal:
        """Authenticate then authorize; the only entry point routers use."""
        return self.authorize(self.authenticate(username, password))
