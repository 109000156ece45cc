# src/threadline/api/v1/endpoints/communities.py
"""Community-related endpoints."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from threadline.api.v1.dependencies import InvalidatorDep, PageDep, PageSizeDep, SessionDep
from threadline.core.settings import settings
from threadline.schemas import (
    CommunitiesPage,
    CommunityCreate,
    CommunityDetailOut,
    CommunityOut,
    CommunityPostsOut,
    CommunityUpdate,
    MembershipChange,
)
from threadline.services import community_service

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=CommunitiesPage)
async def list_communities(
    db: SessionDep,
    search: str | None = Query(None, description="Match against username or name"),
    page: PageDep = 1,
    page_size: PageSizeDep = settings.default_page_size,
    sort: Literal["asc", "desc"] = Query("desc"),
) -> CommunitiesPage:
    return community_service.fetch_communities(
        db,
        search_term=search,
        page_number=page,
        page_size=page_size,
        sort_order=sort,
    )


@router.post("/", response_model=CommunityOut, status_code=status.HTTP_201_CREATED)
async def create_community(data: CommunityCreate, db: SessionDep) -> CommunityOut:
    """Create a new community."""
    return community_service.create_community(db, data)


@router.get("/{community_id}", response_model=CommunityDetailOut)
async def get_community(community_id: str, db: SessionDep) -> CommunityDetailOut:
    """Get a community with its creator and members."""
    community = community_service.fetch_community_details(db, community_id)
    if community is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community not found")
    return community


@router.get("/{community_id}/threads", response_model=CommunityPostsOut)
async def get_community_threads(community_id: str, db: SessionDep) -> CommunityPostsOut:
    return community_service.fetch_community_posts(db, community_id)


@router.patch("/{community_id}", response_model=CommunityOut)
async def update_community(
    community_id: str,
    data: CommunityUpdate,
    db: SessionDep,
    invalidator: InvalidatorDep,
    path: str | None = Query(None, description="Path to revalidate"),
) -> CommunityOut:
    return community_service.update_community_info(
        db,
        community_id,
        data,
        path=path,
        invalidator=invalidator,
    )


@router.post("/{community_id}/members", response_model=CommunityOut,
             status_code=status.HTTP_201_CREATED)
async def join_community(
    community_id: str,
    data: MembershipChange,
    db: SessionDep,
) -> CommunityOut:
    """Add a member to a community."""
    return community_service.add_member_to_community(db, community_id, data.user_id)


@router.delete("/{community_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def leave_community(community_id: str, user_id: str, db: SessionDep) -> None:
    """Remove a member from a community."""
    community_service.remove_user_from_community(db, user_id, community_id)
