"""Data access helpers for users, threads and communities."""

from .community_repo import CommunityRepository
from .thread_repo import ThreadRepository
from .user_repo import UserRepository

__all__ = ["CommunityRepository", "ThreadRepository", "UserRepository"]
