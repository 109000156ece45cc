"""
Pydantic schemas for operation inputs and results.

Results are built from ORM instances while the session is still open, so
callers receive plain values rather than lazily loaded records.
"""

from .common import AuthorOut, CommunityRef
from .community import (
    CommunitiesPage,
    CommunityCreate,
    CommunityDetailOut,
    CommunityOut,
    CommunityPostsOut,
    CommunityUpdate,
    MembershipChange,
)
from .thread import (
    ActivityItem,
    ActivityPage,
    CommentCreate,
    FeedThreadOut,
    PostsPage,
    ReplyLeaf,
    ReplyOut,
    ReplyPreview,
    ThreadCreate,
    ThreadDeleteRequest,
    ThreadDetailOut,
)
from .user import UserOut, UserPostsOut, UsersPage, UserUpdate

__all__ = [
    "ActivityItem", "ActivityPage",
    "AuthorOut", "CommunityRef",
    "CommentCreate",
    "CommunitiesPage", "CommunityCreate", "CommunityDetailOut", "CommunityOut",
    "CommunityPostsOut", "CommunityUpdate", "MembershipChange",
    "FeedThreadOut", "PostsPage",
    "ReplyLeaf", "ReplyOut", "ReplyPreview",
    "ThreadCreate", "ThreadDeleteRequest", "ThreadDetailOut",
    "UserOut", "UserPostsOut", "UsersPage", "UserUpdate",
]
