"""Reference-set tables and column helpers shared by the models.

Each set is a two-column table whose composite primary key gives add-set
semantics. None of them carry foreign keys: they are denormalised indexes and
may hold references to records that no longer exist.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, Integer, Table

from threadline.db.session import Base


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


# User.threads: threads the user posted (top-level posts only).
user_threads = Table(
    "user_threads",
    Base.metadata,
    Column("user_id", Integer, primary_key=True),
    Column("thread_id", Integer, primary_key=True, index=True),
)

# Thread.children: direct replies.
thread_children = Table(
    "thread_children",
    Base.metadata,
    Column("parent_thread_id", Integer, primary_key=True),
    Column("child_thread_id", Integer, primary_key=True, index=True),
)

# Community.threads: threads posted in the community.
community_threads = Table(
    "community_threads",
    Base.metadata,
    Column("community_id", Integer, primary_key=True),
    Column("thread_id", Integer, primary_key=True, index=True),
)

# Community.members
community_members = Table(
    "community_members",
    Base.metadata,
    Column("community_id", Integer, primary_key=True),
    Column("user_id", Integer, primary_key=True, index=True),
)
