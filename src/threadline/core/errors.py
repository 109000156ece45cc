"""Error taxonomy shared by every data-access operation."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class ThreadlineError(RuntimeError):
    """Base exception raised for data-access failures."""


class StoreUnavailable(ThreadlineError):
    """Raised when the store connection cannot be established."""


class NotFound(ThreadlineError):
    """Raised when a referenced record does not exist."""


class UserNotFound(NotFound):
    """Raised when a user reference does not resolve."""


class ThreadNotFound(NotFound):
    """Raised when a thread reference does not resolve."""


class CommunityNotFound(NotFound):
    """Raised when a community reference does not resolve."""


class ValidationFailed(ThreadlineError):
    """Raised when input is missing a required value or is out of range."""


class CascadeDepthExceeded(ValidationFailed):
    """Raised when a reply chain is deeper than the configured cascade limit."""


class StoreOperationFailed(ThreadlineError):
    """Raised when the store rejects a read or write."""


def _session_of(args: tuple, kwargs: dict) -> Session | None:
    candidate = args[0] if args else kwargs.get("db")
    return candidate if isinstance(candidate, Session) else None


def wrap_store_errors(prefix: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Re-raise failures of the wrapped operation with an operation-specific prefix.

    Domain errors keep their class so callers can still tell a missing thread
    from a broken store; raw SQLAlchemy errors become ``StoreOperationFailed``.
    Uncommitted work on the operation's session is rolled back; earlier
    commits made by the operation stay in place.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except (ThreadlineError, SQLAlchemyError) as exc:
                db = _session_of(args, kwargs)
                if db is not None:
                    db.rollback()
                if isinstance(exc, ThreadlineError):
                    raise type(exc)(f"{prefix}: {exc}") from exc
                logger.error("%s: %s", prefix, exc)
                raise StoreOperationFailed(f"{prefix}: {exc}") from exc

        return wrapper

    return decorator
