"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from threadline.core.settings import settings
from threadline.db.session import get_db
from threadline.services.revalidation import PathInvalidator, get_invalidator

SessionDep = Annotated[Session, Depends(get_db)]
InvalidatorDep = Annotated[PathInvalidator, Depends(get_invalidator)]
PageDep = Annotated[int, Query(ge=1, description="1-based page number")]
PageSizeDep = Annotated[
    int,
    Query(ge=1, le=settings.max_page_size, description="Items per page"),
]
