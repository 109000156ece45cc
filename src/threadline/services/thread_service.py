"""Thread operations: feed, single-thread fetch, create, comment, delete."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from threadline.core.errors import (
    CommunityNotFound,
    ThreadNotFound,
    UserNotFound,
    ValidationFailed,
    wrap_store_errors,
)
from threadline.core.settings import settings
from threadline.models import Thread
from threadline.repositories import CommunityRepository, ThreadRepository, UserRepository
from threadline.repositories.thread_repo import DETAIL_EXPANSION, FEED_EXPANSION
from threadline.schemas import FeedThreadOut, PostsPage, ThreadDetailOut
from threadline.services.cascade import CascadeDeleteEngine, DeletionReport
from threadline.services.pagination import FeedQuery, PageRequest, paginate
from threadline.services.revalidation import PathInvalidator, get_invalidator

logger = logging.getLogger(__name__)

__all__ = [
    "fetch_posts",
    "fetch_thread_by_id",
    "create_thread",
    "add_comment_to_thread",
    "delete_thread",
]


def _require_text(text: str) -> str:
    if text is None or not text.strip():
        raise ValidationFailed("Thread text must not be empty")
    return text


@wrap_store_errors("Failed to fetch posts")
def fetch_posts(
    db: Session,
    page_number: int = 1,
    page_size: int | None = None,
) -> PostsPage:
    """Return one page of top-level threads, newest first.

    Each thread carries its author, its community and the author of each
    direct reply. Deeper replies are not expanded.
    """
    page = PageRequest(page_number, page_size or settings.default_page_size)
    rows, has_next = paginate(db, Thread, FeedQuery(), page, options=FEED_EXPANSION)
    logger.debug("Feed page %d: %d posts, has_next=%s", page.page_number, len(rows), has_next)
    return PostsPage(
        posts=[FeedThreadOut.model_validate(row) for row in rows],
        has_next=has_next,
    )


@wrap_store_errors("Failed to fetch thread")
def fetch_thread_by_id(db: Session, thread_id: int) -> ThreadDetailOut | None:
    """Return a thread with two levels of replies expanded, or None."""
    thread = ThreadRepository(db).get_by_id(thread_id, expand=DETAIL_EXPANSION)
    if thread is None:
        return None
    return ThreadDetailOut.model_validate(thread)


@wrap_store_errors("Failed to create thread")
def create_thread(
    db: Session,
    *,
    text: str,
    author_id: int,
    community_id: str | None = None,
    path: str = "/",
    invalidator: PathInvalidator | None = None,
) -> int:
    """Create a top-level thread and index it under its author.

    Args:
        db: Database session.
        text: Thread body; must not be blank.
        author_id: Store id of an existing user.
        community_id: External id of the community, or None for a personal thread.
        path: Logical path to revalidate on success.
        invalidator: Cache invalidation collaborator (defaults to the process-wide one).

    Returns:
        Store id of the new thread.

    Raises:
        ValidationFailed: If ``text`` is blank.
        UserNotFound: If the author does not exist.
        CommunityNotFound: If ``community_id`` does not resolve and unresolved
            communities are not allowed.
    """
    _require_text(text)
    users = UserRepository(db)
    communities = CommunityRepository(db)

    if users.get_by_id(author_id) is None:
        raise UserNotFound(f"User {author_id} not found")

    community = None
    if community_id is not None:
        community = communities.get_by_external_id(community_id)
        if community is None:
            if not settings.allow_unresolved_community:
                raise CommunityNotFound(f"Community {community_id} not found")
            logger.warning(
                "Community %s not found; creating thread without a community",
                community_id,
            )

    thread = ThreadRepository(db).create(
        text=text,
        author_id=author_id,
        community_id=community.id if community is not None else None,
    )
    users.add_thread(author_id, thread.id)
    if community is not None:
        communities.add_thread(community.id, thread.id)
    db.commit()

    logger.info("Created thread %s by user %s", thread.id, author_id)
    (invalidator or get_invalidator()).revalidate_path(path)
    return thread.id


@wrap_store_errors("Failed to add comment")
def add_comment_to_thread(
    db: Session,
    *,
    thread_id: int,
    text: str,
    user_id: int,
    path: str = "/",
    invalidator: PathInvalidator | None = None,
) -> int:
    """Reply to a thread.

    The reply and the parent's ``children`` entry are written in a single
    commit, so a failure leaves neither behind.

    Returns:
        Store id of the new reply.

    Raises:
        ThreadNotFound: If the replied-to thread does not exist.
        UserNotFound: If the replying user does not exist.
        ValidationFailed: If ``text`` is blank.
    """
    _require_text(text)
    threads = ThreadRepository(db)

    parent = threads.get_by_id(thread_id)
    if parent is None:
        raise ThreadNotFound(f"Thread {thread_id} not found")
    if UserRepository(db).get_by_id(user_id) is None:
        raise UserNotFound(f"User {user_id} not found")

    comment = threads.create(text=text, author_id=user_id, parent_id=parent.id)
    threads.add_child(parent.id, comment.id)
    db.commit()

    logger.info("Added comment %s to thread %s by user %s", comment.id, parent.id, user_id)
    (invalidator or get_invalidator()).revalidate_path(path)
    return comment.id


@wrap_store_errors("Failed to delete thread")
def delete_thread(
    db: Session,
    thread_id: int,
    path: str = "/",
    *,
    invalidator: PathInvalidator | None = None,
) -> DeletionReport:
    """Delete a thread, its whole reply subtree and every reference to them.

    See ``threadline.services.cascade`` for the step boundaries; work already
    committed is not undone when a later step fails.
    """
    report = CascadeDeleteEngine(db).delete(thread_id)
    (invalidator or get_invalidator()).revalidate_path(path)
    return report
