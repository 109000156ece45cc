"""Data access helpers for working with communities."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadline.models import Community, community_members, community_threads
from threadline.repositories.reference_sets import add_to_set, pull_from_set, set_members

__all__ = ["CommunityRepository"]


class CommunityRepository:
    """Thin wrapper around store access for community records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_external_id(self, external_id: str, *, expand: Iterable = ()) -> Community | None:
        """Return a community by its external ``id`` field (not the store key)."""
        stmt = (
            select(Community)
            .where(Community.external_id == external_id)
            .options(*expand)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def create(
        self,
        *,
        external_id: str,
        name: str,
        username: str,
        image: str | None,
        bio: str | None,
        created_by_id: int,
    ) -> Community:
        community = Community(
            external_id=external_id,
            name=name,
            username=username,
            image=image,
            bio=bio,
            created_by_id=created_by_id,
        )
        self.session.add(community)
        self.session.flush()
        return community

    def add_thread(self, community_id: int, thread_id: int) -> bool:
        return add_to_set(self.session, community_threads, community_id, thread_id)

    def pull_threads(self, community_ids: Iterable[int], thread_ids: Iterable[int]) -> int:
        return pull_from_set(self.session, community_threads, community_ids, thread_ids)

    def thread_ids(self, community_id: int) -> set[int]:
        return set_members(self.session, community_threads, [community_id])

    def add_member(self, community_id: int, user_id: int) -> bool:
        return add_to_set(self.session, community_members, community_id, user_id)

    def remove_member(self, community_id: int, user_id: int) -> int:
        return pull_from_set(self.session, community_members, [community_id], [user_id])

    def member_ids(self, community_id: int) -> set[int]:
        return set_members(self.session, community_members, [community_id])
