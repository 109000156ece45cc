"""Offset pagination and the typed filters each listing uses.

Every listing runs two independent queries: the page itself (skip/limit) and
a count over the same criteria. ``has_next`` is true iff more rows exist past
the returned page.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.interfaces import LoaderOption

from threadline.core.errors import ValidationFailed
from threadline.core.settings import settings
from threadline.models import Community, Thread, User

SortOrder = Literal["asc", "desc"]

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Validated page coordinates (1-based page number)."""

    page_number: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValidationFailed(f"page_number must be >= 1, got {self.page_number}")
        if self.page_size < 1:
            raise ValidationFailed(f"page_size must be > 0, got {self.page_size}")
        if self.page_size > settings.max_page_size:
            raise ValidationFailed(
                f"page_size must be <= {settings.max_page_size}, got {self.page_size}"
            )

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size


def compute_has_next(total: int, skip: int, returned: int) -> bool:
    """Return True when rows remain beyond ``skip + returned``."""
    return total > skip + returned


def _contains(column: Any, term: str) -> ColumnElement[bool]:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


@dataclass(frozen=True)
class FeedQuery:
    """Top-level threads, newest first."""

    def criteria(self) -> list[ColumnElement[bool]]:
        return [Thread.parent_id.is_(None)]

    def ordering(self) -> list[Any]:
        return [Thread.created_at.desc(), Thread.id.desc()]


@dataclass(frozen=True)
class UserSearchQuery:
    """Users other than the caller, optionally filtered by username or name."""

    exclude_external_id: str
    search_term: str | None = None
    sort_order: SortOrder = "desc"

    def criteria(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = [User.external_id != self.exclude_external_id]
        term = (self.search_term or "").strip()
        if term:
            clauses.append(or_(_contains(User.username, term), _contains(User.name, term)))
        return clauses

    def ordering(self) -> list[Any]:
        if self.sort_order == "asc":
            return [User.created_at.asc(), User.id.asc()]
        return [User.created_at.desc(), User.id.desc()]


@dataclass(frozen=True)
class ActivityQuery:
    """Replies among ``candidate_ids`` not written by ``author_id``."""

    author_id: int
    candidate_ids: frozenset[int] = field(default_factory=frozenset)

    def criteria(self) -> list[ColumnElement[bool]]:
        return [
            Thread.id.in_(sorted(self.candidate_ids)),
            Thread.author_id != self.author_id,
        ]

    def ordering(self) -> list[Any]:
        return [Thread.created_at.desc(), Thread.id.desc()]


@dataclass(frozen=True)
class CommunitySearchQuery:
    """Communities, optionally filtered by username or name."""

    search_term: str | None = None
    sort_order: SortOrder = "desc"

    def criteria(self) -> list[ColumnElement[bool]]:
        term = (self.search_term or "").strip()
        if not term:
            return []
        return [or_(_contains(Community.username, term), _contains(Community.name, term))]

    def ordering(self) -> list[Any]:
        # Communities carry no timestamp; the store key grows with creation order.
        if self.sort_order == "asc":
            return [Community.id.asc()]
        return [Community.id.desc()]


def paginate(
    db: Session,
    model: type[T],
    query: FeedQuery | UserSearchQuery | ActivityQuery | CommunitySearchQuery,
    page: PageRequest,
    options: Sequence[LoaderOption] = (),
) -> tuple[list[T], bool]:
    """Return one page of ``model`` rows matching ``query`` and the has-next flag."""
    criteria = query.criteria()
    stmt: Select[Any] = (
        select(model)
        .where(*criteria)
        .order_by(*query.ordering())
        .offset(page.skip)
        .limit(page.page_size)
        .options(*options)
        .execution_options(populate_existing=True)
    )
    rows = list(db.execute(stmt).scalars().unique())

    total = db.execute(select(func.count()).select_from(model).where(*criteria)).scalar_one()
    return rows, compute_has_next(total, page.skip, len(rows))
