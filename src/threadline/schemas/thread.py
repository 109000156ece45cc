"""Thread-related Pydantic schemas.

Expansion depth is fixed per shape: the feed shows reply authors only, a
single thread shows replies and their replies' authors.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field

from threadline.schemas.common import AuthorOut, CommunityRef


class ReplyPreview(BaseModel):
    """A reply reduced to its identity and author."""

    id: int
    author: AuthorOut

    model_config = ConfigDict(from_attributes=True)


class ReplyLeaf(BaseModel):
    """Deepest expanded reply level: text and author, no further children."""

    id: int
    text: str
    parent_id: int | None
    created_at: datetime.datetime
    author: AuthorOut

    model_config = ConfigDict(from_attributes=True)


class ReplyOut(ReplyLeaf):
    """A direct reply with its own replies one level down."""

    children: list[ReplyLeaf] = Field(default_factory=list)


class FeedThreadOut(BaseModel):
    """Thread as listed in the feed."""

    id: int
    text: str
    parent_id: int | None
    created_at: datetime.datetime
    author: AuthorOut
    community: CommunityRef | None = None
    children: list[ReplyPreview] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ThreadDetailOut(BaseModel):
    """Single thread with two levels of replies expanded."""

    id: int
    text: str
    parent_id: int | None
    created_at: datetime.datetime
    author: AuthorOut
    community: CommunityRef | None = None
    children: list[ReplyOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ActivityItem(ReplyLeaf):
    """A reply someone else left on one of the user's threads."""


class PostsPage(BaseModel):
    """One page of the top-level feed."""

    posts: list[FeedThreadOut]
    has_next: bool


class ActivityPage(BaseModel):
    """One page of activity for a user."""

    comments: list[ActivityItem]
    has_next: bool


class ThreadCreate(BaseModel):
    """Schema for creating a top-level thread."""

    text: str = Field(..., min_length=1, description="Thread body")
    author_id: int = Field(..., description="Store id of the author")
    community_id: str | None = Field(None, description="External community id")
    path: str = Field("/", description="Invalidation path")


class CommentCreate(BaseModel):
    """Schema for replying to a thread."""

    text: str = Field(..., min_length=1, description="Reply body")
    user_id: int = Field(..., description="Store id of the replying user")
    path: str = Field("/", description="Invalidation path")


class ThreadDeleteRequest(BaseModel):
    """Schema for cascading thread deletion."""

    path: str = Field("/", description="Invalidation path")
