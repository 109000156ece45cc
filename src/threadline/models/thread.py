"""SQLAlchemy model for threads (posts and replies)."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.models.common import utcnow

if TYPE_CHECKING:
    from threadline.models.community import Community
    from threadline.models.user import User


class Thread(Base):
    """A post, or a reply when ``parent_id`` is set.

    Replies form a forest: ``parent_id`` points up to the replied-to thread and
    the parent lists the reply in its ``thread_children`` set.
    """

    __tablename__ = "threads"
    # Never reuse keys: deleted ids may still be listed in reference sets.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column("_id", Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        "author",
        Integer,
        ForeignKey("users._id"),
        nullable=False,
        index=True,
    )
    community_id: Mapped[int | None] = mapped_column(
        "community",
        Integer,
        ForeignKey("communities._id"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    # Top-level threads have parentId = NULL. No foreign key: the reply link is
    # walked and bulk-deleted by the cascade engine.
    parent_id: Mapped[int | None] = mapped_column("parentId", Integer, nullable=True, index=True)

    author: Mapped[User] = relationship("User", foreign_keys=[author_id])
    community: Mapped[Community | None] = relationship("Community", foreign_keys=[community_id])
    children: Mapped[list[Thread]] = relationship(
        "Thread",
        secondary="thread_children",
        primaryjoin="Thread.id == foreign(thread_children.c.parent_thread_id)",
        secondaryjoin="Thread.id == foreign(thread_children.c.child_thread_id)",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Thread(id={self.id}, parent_id={self.parent_id})>"
