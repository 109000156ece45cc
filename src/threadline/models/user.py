"""SQLAlchemy model for user profiles."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.models.common import utcnow

if TYPE_CHECKING:
    from threadline.models.community import Community
    from threadline.models.thread import Thread


class User(Base):
    """Profile of a person known to the external identity provider.

    Attributes:
        id: Store-internal primary key (column ``_id``).
        external_id: Identifier issued by the identity provider (column ``externalId``).
        username: Unique handle, always stored lower-case.
        onboarded: True once the profile has been completed.
        threads: Read-only view over the ``user_threads`` index.
    """

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column("_id", Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(
        "externalId",
        String(255),
        unique=True,
        nullable=False,
    )
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    onboarded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    threads: Mapped[list[Thread]] = relationship(
        "Thread",
        secondary="user_threads",
        primaryjoin="User.id == foreign(user_threads.c.user_id)",
        secondaryjoin="Thread.id == foreign(user_threads.c.thread_id)",
        viewonly=True,
    )
    communities: Mapped[list[Community]] = relationship(
        "Community",
        secondary="community_members",
        primaryjoin="User.id == foreign(community_members.c.user_id)",
        secondaryjoin="Community.id == foreign(community_members.c.community_id)",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
