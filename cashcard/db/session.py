"""
Engine and session factories for the cash card store.

A ``SessionFactory`` is what ``CashCardRepository`` is handed: a callable
returning a context-managed ``Session`` that is closed on exit.
``make_session_factory(engine)`` builds one for any engine; ``get_session``
is the factory bound to the engine configured by ``DATABASE_URL``.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, ContextManager, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cashcard.core.config import get_settings

Base = declarative_base()

SessionFactory = Callable[[], ContextManager[Session]]


def build_engine(url: str) -> Engine:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured for the cash card store.")
    options = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # requests are served from a threadpool
        options["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **options)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().database_url)


def make_session_factory(engine: Engine) -> SessionFactory:
    maker = sessionmaker(bind=engine, autoflush=False, future=True)

    @contextmanager
    def session_scope() -> Iterator[Session]:
        session: Session = maker()
        try:
            yield session
        finally:
            session.close()

    return session_scope


@lru_cache
def default_session_factory() -> SessionFactory:
    return make_session_factory(get_engine())


@contextmanager
def get_session() -> Iterator[Session]:
    with default_session_factory()() as session:
        yield session
