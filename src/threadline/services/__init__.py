# src/threadline/services/__init__.py
"""Data-access operations exposed to the presentation layer."""

from .cascade import CascadeDeleteEngine, DeletionPlan, DeletionReport
from .community_service import (
    add_member_to_community,
    create_community,
    fetch_communities,
    fetch_community_details,
    fetch_community_posts,
    remove_user_from_community,
    update_community_info,
)
from .revalidation import PathInvalidator, RecordingInvalidator, get_invalidator
from .thread_service import (
    add_comment_to_thread,
    create_thread,
    delete_thread,
    fetch_posts,
    fetch_thread_by_id,
)
from .user_service import fetch_user, fetch_user_posts, fetch_users, get_activity, update_user

__all__ = [
    "CascadeDeleteEngine", "DeletionPlan", "DeletionReport",
    "PathInvalidator", "RecordingInvalidator", "get_invalidator",
    "add_comment_to_thread", "create_thread", "delete_thread",
    "fetch_posts", "fetch_thread_by_id",
    "fetch_user", "fetch_user_posts", "fetch_users", "get_activity", "update_user",
    "add_member_to_community", "create_community", "fetch_communities",
    "fetch_community_details", "fetch_community_posts",
    "remove_user_from_community", "update_community_info",
]
