"""Cascading thread deletion.

Deleting a thread removes its whole reply subtree and pulls the deleted ids
out of the ``threads`` sets of every touched user and community.

The engine works in two phases. Planning only reads: it loads the root,
walks ``parentId`` links breadth-first and gathers the ids to delete together
with the authors and communities they touch. Execution then deletes every
planned thread in one statement and repairs the reference sets.

Execution is not one transaction unless ``single_transaction`` is set: the
bulk delete is committed before the reference sets are repaired, so a failure
in between leaves deleted threads still listed in user/community sets. Nothing
is rolled back after the first commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session, selectinload

from threadline.core.errors import CascadeDepthExceeded, ThreadNotFound
from threadline.core.settings import settings
from threadline.models import Thread
from threadline.repositories import CommunityRepository, ThreadRepository, UserRepository

logger = logging.getLogger(__name__)

__all__ = ["CascadeDeleteEngine", "DeletionPlan", "DeletionReport"]


@dataclass(frozen=True)
class DeletionPlan:
    """Everything a cascade will touch, computed before any write."""

    root_id: int
    thread_ids: frozenset[int]
    author_ids: frozenset[int]
    community_ids: frozenset[int]
    depth: int

    @property
    def descendant_ids(self) -> frozenset[int]:
        return self.thread_ids - {self.root_id}


@dataclass(frozen=True)
class DeletionReport:
    """Outcome of an executed cascade."""

    plan: DeletionPlan
    threads_deleted: int
    user_refs_removed: int
    community_refs_removed: int


class CascadeDeleteEngine:
    """Plans and executes the deletion of a thread and all of its replies."""

    def __init__(
        self,
        session: Session,
        *,
        max_depth: int | None = None,
        single_transaction: bool | None = None,
    ) -> None:
        self.session = session
        self.max_depth = settings.cascade_max_depth if max_depth is None else max_depth
        self.single_transaction = (
            settings.cascade_single_transaction
            if single_transaction is None
            else single_transaction
        )
        self.threads = ThreadRepository(session)
        self.users = UserRepository(session)
        self.communities = CommunityRepository(session)

    def collect_descendants(self, root: Thread) -> tuple[list[Thread], int]:
        """Return every reply below ``root`` and the depth of the deepest one.

        Uses an iterative worklist, one query per reply level. A thread seen
        twice (only possible if the forest invariant was broken) is skipped.

        Raises:
            CascadeDepthExceeded: If the reply chain is deeper than ``max_depth``.
        """
        visited = {root.id}
        descendants: list[Thread] = []
        frontier = [root.id]
        depth = 0

        while frontier:
            next_frontier: list[int] = []
            for reply in self.threads.replies_to(frontier):
                if reply.id in visited:
                    logger.warning(
                        "Thread %s reached twice while collecting replies of %s; skipping",
                        reply.id,
                        root.id,
                    )
                    continue
                visited.add(reply.id)
                descendants.append(reply)
                next_frontier.append(reply.id)

            if next_frontier:
                depth += 1
                if depth > self.max_depth:
                    raise CascadeDepthExceeded(
                        f"Reply chain under thread {root.id} is deeper than {self.max_depth}"
                    )
            frontier = next_frontier

        return descendants, depth

    def plan(self, thread_id: int) -> DeletionPlan:
        """Read everything the cascade needs without writing.

        Raises:
            ThreadNotFound: If ``thread_id`` does not resolve.
        """
        root = self.threads.get_by_id(
            thread_id,
            expand=(selectinload(Thread.author), selectinload(Thread.community)),
        )
        if root is None:
            raise ThreadNotFound(f"Thread {thread_id} not found")

        descendants, depth = self.collect_descendants(root)
        touched = [root, *descendants]

        return DeletionPlan(
            root_id=root.id,
            thread_ids=frozenset(t.id for t in touched),
            author_ids=frozenset(t.author_id for t in touched if t.author_id is not None),
            community_ids=frozenset(
                t.community_id for t in touched if t.community_id is not None
            ),
            depth=depth,
        )

    def execute(self, plan: DeletionPlan) -> DeletionReport:
        """Delete the planned threads, then repair user and community sets."""
        deleted = self.threads.bulk_delete(plan.thread_ids)
        if not self.single_transaction:
            self.session.commit()

        user_refs = self.users.pull_threads(plan.author_ids, plan.thread_ids)
        community_refs = self.communities.pull_threads(plan.community_ids, plan.thread_ids)
        self.session.commit()

        report = DeletionReport(
            plan=plan,
            threads_deleted=deleted,
            user_refs_removed=user_refs,
            community_refs_removed=community_refs,
        )
        logger.info(
            "Deleted thread %s with %d replies (depth %d); pulled %d user and %d community refs",
            plan.root_id,
            len(plan.descendant_ids),
            plan.depth,
            user_refs,
            community_refs,
        )
        return report

    def delete(self, thread_id: int) -> DeletionReport:
        """Plan and execute the cascade for ``thread_id``."""
        return self.execute(self.plan(thread_id))
