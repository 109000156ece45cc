# src/threadline/models/__init__.py
"""SQLAlchemy models for the Threadline store."""

from .common import community_members, community_threads, thread_children, user_threads
from .community import Community
from .thread import Thread
from .user import User

__all__ = [
    "Community",
    "Thread",
    "User",
    "community_members", "community_threads", "thread_children", "user_threads",
]
