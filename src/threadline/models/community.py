"""SQLAlchemy model for communities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base

if TYPE_CHECKING:
    from threadline.models.thread import Thread
    from threadline.models.user import User


class Community(Base):
    """Community grouping threads and member users.

    ``external_id`` is the identifier issued by the identity provider and is
    persisted in the ``id`` column; the store key lives in ``_id``.
    """

    __tablename__ = "communities"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column("_id", Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column("id", String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(
        "createdBy",
        Integer,
        ForeignKey("users._id"),
        nullable=True,
    )

    created_by: Mapped[User | None] = relationship("User", foreign_keys=[created_by_id])
    threads: Mapped[list[Thread]] = relationship(
        "Thread",
        secondary="community_threads",
        primaryjoin="Community.id == foreign(community_threads.c.community_id)",
        secondaryjoin="Thread.id == foreign(community_threads.c.thread_id)",
        viewonly=True,
    )
    members: Mapped[list[User]] = relationship(
        "User",
        secondary="community_members",
        primaryjoin="Community.id == foreign(community_members.c.community_id)",
        secondaryjoin="User.id == foreign(community_members.c.user_id)",
        viewonly=True,
    )
