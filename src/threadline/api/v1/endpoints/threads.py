# src/threadline/api/v1/endpoints/threads.py
"""Thread-related endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from threadline.api.v1.dependencies import InvalidatorDep, PageDep, PageSizeDep, SessionDep
from threadline.core.settings import settings
from threadline.schemas import CommentCreate, PostsPage, ThreadCreate, ThreadDetailOut
from threadline.services import thread_service

router = APIRouter(prefix="/threads", tags=["threads"])


@router.get("/", response_model=PostsPage)
async def list_threads(
    db: SessionDep,
    page: PageDep = 1,
    page_size: PageSizeDep = settings.default_page_size,
) -> PostsPage:
    """List top-level threads, newest first."""
    return thread_service.fetch_posts(db, page, page_size)


@router.get("/{thread_id}", response_model=ThreadDetailOut)
async def get_thread(thread_id: int, db: SessionDep) -> ThreadDetailOut:
    """Get a thread with two levels of replies.

    Raises:
        HTTPException: If the thread does not exist.
    """
    thread = thread_service.fetch_thread_by_id(db, thread_id)
    if thread is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found")
    return thread


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_thread(
    data: ThreadCreate,
    db: SessionDep,
    invalidator: InvalidatorDep,
) -> dict[str, int]:
    """Create a top-level thread."""
    thread_id = thread_service.create_thread(
        db,
        text=data.text,
        author_id=data.author_id,
        community_id=data.community_id,
        path=data.path,
        invalidator=invalidator,
    )
    return {"id": thread_id}


@router.post("/{thread_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    thread_id: int,
    data: CommentCreate,
    db: SessionDep,
    invalidator: InvalidatorDep,
) -> dict[str, int]:
    """Reply to a thread."""
    comment_id = thread_service.add_comment_to_thread(
        db,
        thread_id=thread_id,
        text=data.text,
        user_id=data.user_id,
        path=data.path,
        invalidator=invalidator,
    )
    return {"id": comment_id}


@router.delete("/{thread_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_thread(
    thread_id: int,
    db: SessionDep,
    invalidator: InvalidatorDep,
    path: str = Query("/", description="Path to revalidate"),
) -> None:
    """Delete a thread together with all of its replies."""
    thread_service.delete_thread(db, thread_id, path, invalidator=invalidator)
