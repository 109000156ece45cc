# src/threadline/api/v1/endpoints/__init__.py
"""API endpoint routers."""

from .communities import router as communities_router
from .threads import router as threads_router
from .users import router as users_router

__all__ = ["communities_router", "threads_router", "users_router"]
