"""User-related Pydantic schemas."""

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from threadline.schemas.thread import FeedThreadOut


class UserOut(BaseModel):
    """Profile returned by user lookups."""

    id: int
    external_id: str
    username: str
    name: str
    bio: str | None = None
    image: str | None = None
    onboarded: bool
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Profile fields saved on onboarding or profile edit."""

    external_id: str = Field(..., min_length=1, description="Identity provider user id")
    username: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1)
    bio: str | None = None
    image: str | None = Field(None, description="Profile image URI")
    path: str = Field("/", description="Invalidation path")

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        """Usernames are case-insensitive; store them lower-case."""
        return v.strip().lower()


class UserPostsOut(UserOut):
    """Profile with the user's threads expanded."""

    threads: list[FeedThreadOut] = Field(default_factory=list)


class UsersPage(BaseModel):
    """One page of a user listing."""

    users: list[UserOut]
    has_next: bool
