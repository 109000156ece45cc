"""initial layout

Revision ID: 3c1f9a7e2b40
Revises:
Create Date: 2026-10-18 09:12:44.310271

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7e2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Reference sets: (table, owner column, member column)
_REFERENCE_SETS = [
    ("user_threads", "user_id", "thread_id"),
    ("thread_children", "parent_thread_id", "child_thread_id"),
    ("community_threads", "community_id", "thread_id"),
    ("community_members", "community_id", "user_id"),
]


def upgrade() -> None:
    """Create users, communities, threads and their reference sets."""
    op.create_table(
        "users",
        sa.Column("_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("externalId", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("onboarded", sa.Boolean(), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("_id"),
        sa.UniqueConstraint("externalId"),
        sa.UniqueConstraint("username"),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "communities",
        sa.Column("_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("createdBy", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["createdBy"], ["users._id"]),
        sa.PrimaryKeyConstraint("_id"),
        sa.UniqueConstraint("id"),
        sa.UniqueConstraint("username"),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "threads",
        sa.Column("_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.Integer(), nullable=False),
        sa.Column("community", sa.Integer(), nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("parentId", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["author"], ["users._id"]),
        sa.ForeignKeyConstraint(["community"], ["communities._id"]),
        sa.PrimaryKeyConstraint("_id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_threads_author", "threads", ["author"])
    op.create_index("ix_threads_community", "threads", ["community"])
    op.create_index("ix_threads_createdAt", "threads", ["createdAt"])
    op.create_index("ix_threads_parentId", "threads", ["parentId"])

    for table, owner, member in _REFERENCE_SETS:
        op.create_table(
            table,
            sa.Column(owner, sa.Integer(), nullable=False),
            sa.Column(member, sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint(owner, member),
        )
        op.create_index(f"ix_{table}_{member}", table, [member])


def downgrade() -> None:
    """Drop every table created by this revision."""
    for table, _owner, member in reversed(_REFERENCE_SETS):
        op.drop_index(f"ix_{table}_{member}", table_name=table)
        op.drop_table(table)
    for column in ("parentId", "createdAt", "community", "author"):
        op.drop_index(f"ix_threads_{column}", table_name="threads")
    op.drop_table("threads")
    op.drop_table("communities")
    op.drop_table("users")
