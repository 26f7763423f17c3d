"""Database helpers (engine/session export)."""

from .session import Base, SessionFactory, build_engine, get_engine, get_session, make_session_factory

__all__ = ["Base", "SessionFactory", "build_engine", "get_engine", "get_session", "make_session_factory"]
