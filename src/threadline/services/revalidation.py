"""Cache invalidation collaborator.

Mutations report the logical path whose cached rendering is now stale. The
rendering layer owns the cache; this module only carries the signal.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class PathInvalidator(Protocol):
    """Anything that can be told a logical path is stale."""

    def revalidate_path(self, path: str) -> None:
        ...


class RecordingInvalidator:
    """Default invalidator that logs and remembers stale paths until drained."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stale: list[str] = []

    def revalidate_path(self, path: str) -> None:
        logger.debug("Revalidating path %s", path)
        with self._lock:
            self._stale.append(path)

    @property
    def stale_paths(self) -> list[str]:
        """Paths reported since the last drain, oldest first."""
        with self._lock:
            return list(self._stale)

    def drain(self) -> list[str]:
        """Return and forget all reported paths."""
        with self._lock:
            paths, self._stale = self._stale, []
        return paths


class _InvalidatorSingleton:
    """Singleton wrapper for the process-wide invalidator."""

    _instance: PathInvalidator | None = None

    @classmethod
    def get_instance(cls) -> PathInvalidator:
        if cls._instance is None:
            cls._instance = RecordingInvalidator()
        return cls._instance

    @classmethod
    def set_instance(cls, invalidator: PathInvalidator | None) -> None:
        cls._instance = invalidator


def get_invalidator() -> PathInvalidator:
    """Return the process-wide invalidator."""
    return _InvalidatorSingleton.get_instance()


def set_invalidator(invalidator: PathInvalidator | None) -> None:
    """Install a different invalidator (``None`` restores the default)."""
    _InvalidatorSingleton.set_instance(invalidator)
