# src/threadline/db/__init__.py
"""Store connection handling and utilities."""

from .session import StoreConnection, get_db, get_store

__all__ = ["StoreConnection", "get_db", "get_store"]
