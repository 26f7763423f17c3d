"""
Persistence adapters.

Services depend on the repository rather than touching SQLAlchemy sessions
directly; every owner-scoped query lives here.
"""
