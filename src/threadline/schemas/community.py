"""Community-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from threadline.schemas.common import AuthorOut
from threadline.schemas.thread import FeedThreadOut


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    id: str = Field(..., min_length=1, description="External community id")
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=255)
    image: str | None = None
    bio: str | None = None
    created_by: str = Field(..., description="External id of the founding user")

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip().lower()


class CommunityUpdate(BaseModel):
    """Schema for editing community metadata."""

    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=255)
    image: str | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip().lower()


class MembershipChange(BaseModel):
    """Schema naming the user joining or leaving a community."""

    user_id: str = Field(..., description="External user id")


class CommunityOut(BaseModel):
    """Community information returned by listings."""

    id: int
    external_id: str
    username: str
    name: str
    image: str | None = None
    bio: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CommunityDetailOut(CommunityOut):
    """Community with creator and members expanded."""

    created_by: AuthorOut | None = None
    members: list[AuthorOut] = Field(default_factory=list)


class CommunityPostsOut(CommunityOut):
    """Community with its threads expanded."""

    threads: list[FeedThreadOut] = Field(default_factory=list)


class CommunitiesPage(BaseModel):
    """One page of a community listing."""

    communities: list[CommunityOut]
    has_next: bool
