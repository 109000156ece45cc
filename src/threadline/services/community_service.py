"""Community operations: create, lookup, listings and membership."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session, selectinload

from threadline.core.errors import CommunityNotFound, UserNotFound, wrap_store_errors
from threadline.core.settings import settings
from threadline.models import Community
from threadline.repositories import CommunityRepository, ThreadRepository, UserRepository
from threadline.schemas import (
    CommunitiesPage,
    CommunityCreate,
    CommunityDetailOut,
    CommunityOut,
    CommunityPostsOut,
    CommunityUpdate,
    FeedThreadOut,
)
from threadline.services.pagination import (
    CommunitySearchQuery,
    PageRequest,
    SortOrder,
    paginate,
)
from threadline.services.revalidation import PathInvalidator, get_invalidator

logger = logging.getLogger(__name__)

__all__ = [
    "create_community",
    "fetch_community_details",
    "fetch_community_posts",
    "fetch_communities",
    "add_member_to_community",
    "remove_user_from_community",
    "update_community_info",
]


def _require_community(repo: CommunityRepository, external_id: str) -> Community:
    community = repo.get_by_external_id(external_id)
    if community is None:
        raise CommunityNotFound(f"Community {external_id} not found")
    return community


@wrap_store_errors("Failed to create community")
def create_community(db: Session, data: CommunityCreate) -> CommunityOut:
    """Create a community; its creator becomes the first member."""
    creator = UserRepository(db).get_by_external_id(data.created_by)
    if creator is None:
        raise UserNotFound(f"User {data.created_by} not found")

    repo = CommunityRepository(db)
    community = repo.create(
        external_id=data.id,
        name=data.name,
        username=data.username,
        image=data.image,
        bio=data.bio,
        created_by_id=creator.id,
    )
    repo.add_member(community.id, creator.id)
    db.commit()

    logger.info("Created community %s by %s", data.id, data.created_by)
    return CommunityOut.model_validate(community)


@wrap_store_errors("Failed to fetch community details")
def fetch_community_details(db: Session, external_id: str) -> CommunityDetailOut | None:
    community = CommunityRepository(db).get_by_external_id(
        external_id,
        expand=(selectinload(Community.created_by), selectinload(Community.members)),
    )
    if community is None:
        return None
    return CommunityDetailOut.model_validate(community)


@wrap_store_errors("Failed to fetch community posts")
def fetch_community_posts(db: Session, external_id: str) -> CommunityPostsOut:
    """Return a community with its threads, newest first.

    Raises:
        CommunityNotFound: If the community does not exist.
    """
    community = _require_community(CommunityRepository(db), external_id)
    threads = ThreadRepository(db).in_community(community.id)
    result = CommunityOut.model_validate(community)
    return CommunityPostsOut(
        **result.model_dump(),
        threads=[FeedThreadOut.model_validate(t) for t in threads],
    )


@wrap_store_errors("Failed to fetch communities")
def fetch_communities(
    db: Session,
    *,
    search_term: str | None = None,
    page_number: int = 1,
    page_size: int | None = None,
    sort_order: SortOrder = "desc",
) -> CommunitiesPage:
    page = PageRequest(page_number, page_size or settings.default_page_size)
    query = CommunitySearchQuery(search_term=search_term, sort_order=sort_order)
    rows, has_next = paginate(db, Community, query, page)
    return CommunitiesPage(
        communities=[CommunityOut.model_validate(c) for c in rows],
        has_next=has_next,
    )


@wrap_store_errors("Failed to add member to community")
def add_member_to_community(db: Session, community_id: str, member_id: str) -> CommunityOut:
    """Add a user to a community's members (no-op if already a member)."""
    repo = CommunityRepository(db)
    community = _require_community(repo, community_id)
    user = UserRepository(db).get_by_external_id(member_id)
    if user is None:
        raise UserNotFound(f"User {member_id} not found")

    if repo.add_member(community.id, user.id):
        logger.info("User %s joined community %s", member_id, community_id)
    db.commit()
    return CommunityOut.model_validate(community)


@wrap_store_errors("Failed to remove user from community")
def remove_user_from_community(db: Session, user_id: str, community_id: str) -> None:
    repo = CommunityRepository(db)
    community = _require_community(repo, community_id)
    user = UserRepository(db).get_by_external_id(user_id)
    if user is None:
        raise UserNotFound(f"User {user_id} not found")

    repo.remove_member(community.id, user.id)
    db.commit()
    logger.info("User %s left community %s", user_id, community_id)


@wrap_store_errors("Failed to update community information")
def update_community_info(
    db: Session,
    community_id: str,
    update: CommunityUpdate,
    *,
    path: str | None = None,
    invalidator: PathInvalidator | None = None,
) -> CommunityOut:
    community = _require_community(CommunityRepository(db), community_id)
    community.name = update.name
    community.username = update.username
    community.image = update.image
    db.commit()

    if path is not None:
        (invalidator or get_invalidator()).revalidate_path(path)
    return CommunityOut.model_validate(community)
