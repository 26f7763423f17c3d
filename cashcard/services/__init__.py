"""
High-level use cases for the Cash Card API.

Routers call these services instead of manipulating repositories or
credentials directly:

- identity_service: principal registry and the identity gate
- cash_card_service: owner-scoped create/read/list/update/delete
"""
