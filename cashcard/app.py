"""
Application factory.

Run with ``uvicorn cashcard.app:create_app --factory``.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from cashcard.core.config import Settings, get_settings
from cashcard.core.error_handlers import register_error_handlers
from cashcard.core.observability import setup_logging
from cashcard.db.create_tables import create_all
from cashcard.repositories.sql_repository import CashCardRepository
from cashcard.routers import cash_cards as cash_cards_router
from cashcard.routers import health as health_router
from cashcard.services.cash_card_service import CashCardService
from cashcard.services.identity_service import IdentityGate, PrincipalRegistry, load_registry

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    registry: Optional[PrincipalRegistry] = None,
    repository: Optional[CashCardRepository] = None,
) -> FastAPI:
    """Build the API with its collaborators wired explicitly into app.state."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if registry is None:
        registry = load_registry(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if settings.auto_create_schema and repository is None:
            create_all()
        logger.info("Cash Card API started (env=%s)", settings.app_env)
        yield

    app = FastAPI(title="Cash Card API", lifespan=lifespan)
    app.state.settings = settings
    app.state.identity_gate = IdentityGate(registry, required_role=settings.required_role)
    app.state.cash_card_service = CashCardService(repository)

    register_error_handlers(app)
    app.include_router(health_router.router)
    app.include_router(cash_cards_router.router)
    return app
