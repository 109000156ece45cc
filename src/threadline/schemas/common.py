"""Shared Pydantic schemas for expanded references."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AuthorOut(BaseModel):
    """Author expansion attached to threads."""

    id: int
    external_id: str
    name: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CommunityRef(BaseModel):
    """Community expansion attached to threads."""

    id: int
    external_id: str
    name: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)
