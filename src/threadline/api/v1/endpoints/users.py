# src/threadline/api/v1/endpoints/users.py
"""User profile, listing and activity endpoints."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from threadline.api.v1.dependencies import InvalidatorDep, PageDep, PageSizeDep, SessionDep
from threadline.core.settings import settings
from threadline.schemas import ActivityPage, UserOut, UserPostsOut, UsersPage, UserUpdate
from threadline.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=UsersPage)
async def list_users(
    db: SessionDep,
    exclude: str = Query(..., description="External id of the requesting user"),
    search: str | None = Query(None, description="Match against username or name"),
    page: PageDep = 1,
    page_size: PageSizeDep = settings.default_page_size,
    sort: Literal["asc", "desc"] = Query("desc"),
) -> UsersPage:
    """List users other than the caller."""
    return user_service.fetch_users(
        db,
        exclude_external_id=exclude,
        search_term=search,
        page_number=page,
        page_size=page_size,
        sort_order=sort,
    )


@router.put("/", response_model=UserOut)
async def save_profile(
    data: UserUpdate,
    db: SessionDep,
    invalidator: InvalidatorDep,
) -> UserOut:
    """Create or update a profile (onboarding and profile edit)."""
    return user_service.update_user(db, data, invalidator=invalidator)


@router.get("/{external_id}", response_model=UserOut)
async def get_user(external_id: str, db: SessionDep) -> UserOut:
    user = user_service.fetch_user(db, external_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{external_id}/threads", response_model=UserPostsOut)
async def get_user_threads(external_id: str, db: SessionDep) -> UserPostsOut:
    """Get a profile with the user's threads."""
    user = user_service.fetch_user_posts(db, external_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{external_id}/activity", response_model=ActivityPage)
async def get_user_activity(
    external_id: str,
    db: SessionDep,
    page: PageDep = 1,
    page_size: PageSizeDep = settings.default_page_size,
) -> ActivityPage:
    """Get replies other users left on this user's threads."""
    return user_service.get_activity(db, external_id, page, page_size)
