"""
Core utilities shared across the Cash Card API.

This package hosts configuration helpers, password hashing, the error
taxonomy and logging setup. Services and routers depend on these primitives
instead of reading os.environ or configuring handlers themselves.
"""
