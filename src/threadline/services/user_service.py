"""User operations: lookup, onboarding upsert, listings and activity."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session, selectinload

from threadline.core.errors import UserNotFound, wrap_store_errors
from threadline.core.settings import settings
from threadline.models import Thread, User
from threadline.repositories import ThreadRepository, UserRepository
from threadline.schemas import (
    ActivityItem,
    ActivityPage,
    UserOut,
    UserPostsOut,
    UsersPage,
    UserUpdate,
)
from threadline.services.pagination import (
    ActivityQuery,
    PageRequest,
    SortOrder,
    UserSearchQuery,
    paginate,
)
from threadline.services.revalidation import PathInvalidator, get_invalidator

logger = logging.getLogger(__name__)

__all__ = [
    "fetch_user",
    "update_user",
    "fetch_user_posts",
    "fetch_users",
    "get_activity",
]

# The user's threads with community and reply authors.
USER_POSTS_EXPANSION = (
    selectinload(User.threads).selectinload(Thread.author),
    selectinload(User.threads).selectinload(Thread.community),
    selectinload(User.threads).selectinload(Thread.children).selectinload(Thread.author),
)


@wrap_store_errors("Failed to fetch user")
def fetch_user(db: Session, external_id: str) -> UserOut | None:
    """Return the profile for an identity-provider id, or None."""
    user = UserRepository(db).get_by_external_id(external_id)
    if user is None:
        return None
    return UserOut.model_validate(user)


@wrap_store_errors("Failed to create/update user")
def update_user(
    db: Session,
    update: UserUpdate,
    *,
    invalidator: PathInvalidator | None = None,
) -> UserOut:
    """Create or update a profile and mark it onboarded.

    The cache is only revalidated when the update came from the profile edit
    page; onboarding itself invalidates nothing.
    """
    user = UserRepository(db).upsert_profile(
        external_id=update.external_id,
        username=update.username.lower(),
        name=update.name,
        bio=update.bio,
        image=update.image,
    )
    db.commit()
    logger.info("Saved profile for %s", update.external_id)

    if update.path == settings.profile_edit_path:
        (invalidator or get_invalidator()).revalidate_path(update.path)
    return UserOut.model_validate(user)


@wrap_store_errors("Failed to fetch user posts")
def fetch_user_posts(db: Session, external_id: str) -> UserPostsOut | None:
    """Return a profile with its indexed threads expanded, or None."""
    user = UserRepository(db).get_by_external_id(external_id, expand=USER_POSTS_EXPANSION)
    if user is None:
        return None
    result = UserPostsOut.model_validate(user)
    result.threads.sort(key=lambda t: (t.created_at, t.id), reverse=True)
    return result


@wrap_store_errors("Failed to fetch users")
def fetch_users(
    db: Session,
    *,
    exclude_external_id: str,
    search_term: str | None = None,
    page_number: int = 1,
    page_size: int | None = None,
    sort_order: SortOrder = "desc",
) -> UsersPage:
    """Return one page of users other than the caller.

    A non-blank ``search_term`` matches case-insensitively against username
    and name.
    """
    page = PageRequest(page_number, page_size or settings.default_page_size)
    query = UserSearchQuery(
        exclude_external_id=exclude_external_id,
        search_term=search_term,
        sort_order=sort_order,
    )
    rows, has_next = paginate(db, User, query, page)
    return UsersPage(users=[UserOut.model_validate(u) for u in rows], has_next=has_next)


@wrap_store_errors("Failed to fetch activity")
def get_activity(
    db: Session,
    external_id: str,
    page_number: int = 1,
    page_size: int | None = None,
) -> ActivityPage:
    """Return replies other users left on threads authored by the given user.

    Candidate replies come from the ``children`` sets of the user's threads,
    so a reply added concurrently may be missed until the next call.

    Raises:
        UserNotFound: If ``external_id`` does not resolve.
    """
    page = PageRequest(page_number, page_size or settings.default_page_size)
    user = UserRepository(db).get_by_external_id(external_id)
    if user is None:
        raise UserNotFound(f"User {external_id} not found")

    threads = ThreadRepository(db)
    candidate_ids = threads.child_ids_of(threads.ids_authored_by(user.id))
    if not candidate_ids:
        return ActivityPage(comments=[], has_next=False)

    query = ActivityQuery(author_id=user.id, candidate_ids=frozenset(candidate_ids))
    rows, has_next = paginate(
        db,
        Thread,
        query,
        page,
        options=(selectinload(Thread.author),),
    )
    return ActivityPage(
        comments=[ActivityItem.model_validate(row) for row in rows],
        has_next=has_next,
    )
