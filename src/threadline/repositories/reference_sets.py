"""Add-to-set and pull operations over the reference-set tables."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import Column, Table, delete, insert, select
from sqlalchemy.orm import Session

__all__ = ["add_to_set", "pull_from_set", "set_members"]


def _columns(table: Table) -> tuple[Column[int], Column[int]]:
    owner, member = list(table.c)
    return owner, member


def add_to_set(db: Session, table: Table, owner_id: int, member_id: int) -> bool:
    """Insert ``(owner_id, member_id)`` unless already present.

    Returns:
        True if a row was inserted, False if the member was already in the set.
    """
    owner, member = _columns(table)
    exists = db.execute(
        select(owner).where(owner == owner_id, member == member_id)
    ).first()
    if exists is not None:
        return False
    db.execute(insert(table).values({owner.name: owner_id, member.name: member_id}))
    return True


def pull_from_set(
    db: Session,
    table: Table,
    owner_ids: Iterable[int],
    member_ids: Iterable[int],
) -> int:
    """Remove every ``member_ids`` entry from the sets owned by ``owner_ids``.

    Returns:
        Number of set entries removed.
    """
    owners = sorted(set(owner_ids))
    members = sorted(set(member_ids))
    if not owners or not members:
        return 0
    owner, member = _columns(table)
    result = db.execute(delete(table).where(owner.in_(owners), member.in_(members)))
    return result.rowcount or 0


def set_members(db: Session, table: Table, owner_ids: Iterable[int]) -> set[int]:
    """Return the union of the sets owned by ``owner_ids``."""
    owners = sorted(set(owner_ids))
    if not owners:
        return set()
    owner, member = _columns(table)
    return set(db.execute(select(member).where(owner.in_(owners))).scalars())
