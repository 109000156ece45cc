"""Data access helpers for working with users."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadline.models import User, user_threads
from threadline.repositories.reference_sets import add_to_set, pull_from_set, set_members

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around store access for user records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by store id."""
        return self.session.execute(select(User).where(User.id == user_id)).scalars().first()

    def get_by_external_id(self, external_id: str, *, expand: Iterable = ()) -> User | None:
        """Return a user by identity-provider id."""
        stmt = (
            select(User)
            .where(User.external_id == external_id)
            .options(*expand)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def upsert_profile(
        self,
        *,
        external_id: str,
        username: str,
        name: str,
        bio: str | None,
        image: str | None,
    ) -> User:
        """Create or update the profile keyed by ``external_id`` and mark it onboarded."""
        user = self.get_by_external_id(external_id)
        if user is None:
            user = User(external_id=external_id)
            self.session.add(user)
        user.username = username
        user.name = name
        user.bio = bio
        user.image = image
        user.onboarded = True
        self.session.flush()
        return user

    def add_thread(self, user_id: int, thread_id: int) -> bool:
        """Add a thread to the user's ``threads`` set (idempotent)."""
        return add_to_set(self.session, user_threads, user_id, thread_id)

    def pull_threads(self, user_ids: Iterable[int], thread_ids: Iterable[int]) -> int:
        """Remove ``thread_ids`` from the ``threads`` sets of ``user_ids``."""
        return pull_from_set(self.session, user_threads, user_ids, thread_ids)

    def thread_ids(self, user_id: int) -> set[int]:
        """Return the ids currently in the user's ``threads`` set."""
        return set_members(self.session, user_threads, [user_id])
