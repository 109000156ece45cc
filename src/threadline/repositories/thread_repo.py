"""Data access helpers for working with threads."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from threadline.models import Thread, community_threads, thread_children
from threadline.repositories.reference_sets import add_to_set, set_members

__all__ = ["ThreadRepository", "FEED_EXPANSION", "DETAIL_EXPANSION"]

# Author, community and the authors of direct replies.
FEED_EXPANSION = (
    selectinload(Thread.author),
    selectinload(Thread.community),
    selectinload(Thread.children).selectinload(Thread.author),
)

# Author, community, direct replies and their replies, each with its author.
DETAIL_EXPANSION = (
    selectinload(Thread.author),
    selectinload(Thread.community),
    selectinload(Thread.children).selectinload(Thread.author),
    selectinload(Thread.children)
    .selectinload(Thread.children)
    .selectinload(Thread.author),
)


class ThreadRepository:
    """Thin wrapper around store access for thread records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, thread_id: int, *, expand: Iterable = ()) -> Thread | None:
        """Return a thread by store id, freshly loaded, or None."""
        stmt = (
            select(Thread)
            .where(Thread.id == thread_id)
            .options(*expand)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def create(
        self,
        *,
        text: str,
        author_id: int,
        community_id: int | None = None,
        parent_id: int | None = None,
    ) -> Thread:
        """Insert a thread and flush so its id is assigned."""
        thread = Thread(
            text=text,
            author_id=author_id,
            community_id=community_id,
            parent_id=parent_id,
        )
        self.session.add(thread)
        self.session.flush()
        return thread

    def add_child(self, parent_id: int, child_id: int) -> bool:
        """Add ``child_id`` to the parent's children set (idempotent)."""
        return add_to_set(self.session, thread_children, parent_id, child_id)

    def child_ids_of(self, parent_ids: Iterable[int]) -> set[int]:
        """Return ids listed in the ``children`` sets of ``parent_ids``."""
        return set_members(self.session, thread_children, parent_ids)

    def replies_to(self, parent_ids: Iterable[int]) -> list[Thread]:
        """Return threads whose ``parentId`` is one of ``parent_ids``."""
        ids = sorted(set(parent_ids))
        if not ids:
            return []
        stmt = select(Thread).where(Thread.parent_id.in_(ids))
        return list(self.session.execute(stmt).scalars())

    def ids_authored_by(self, author_id: int) -> list[int]:
        stmt = select(Thread.id).where(Thread.author_id == author_id)
        return list(self.session.execute(stmt).scalars())

    def in_community(self, community_id: int) -> list[Thread]:
        """Return the threads listed in a community's set, newest first."""
        stmt = (
            select(Thread)
            .join(community_threads, community_threads.c.thread_id == Thread.id)
            .where(community_threads.c.community_id == community_id)
            .order_by(Thread.created_at.desc(), Thread.id.desc())
            .options(*FEED_EXPANSION)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())

    def bulk_delete(self, thread_ids: Iterable[int]) -> int:
        """Delete the given threads and the children sets they own."""
        ids = sorted(set(thread_ids))
        if not ids:
            return 0
        self.session.execute(
            delete(thread_children).where(thread_children.c.parent_thread_id.in_(ids))
        )
        result = self.session.execute(
            delete(Thread)
            .where(Thread.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
