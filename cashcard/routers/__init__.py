"""
FastAPI routers grouped by resource.

Each module exposes an APIRouter included by ``cashcard.app.create_app``.
Request-scoped collaborators (identity gate, services, settings) are read
from ``app.state`` through the helpers in ``dependencies``.
"""
