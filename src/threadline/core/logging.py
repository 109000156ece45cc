"""Process-wide logging setup."""

from __future__ import annotations

import logging

from threadline.core.settings import settings


def configure_logging(service_name: str = "threadline", level: int | str | None = None) -> None:
    """Install a single root handler with a pipe-separated format.

    Existing root handlers are removed so repeated calls do not duplicate output.
    """
    log_format = (
        "%(asctime)s | "
        + service_name + " | "
        "%(levelname)s | "
        "%(name)s | "
        "%(message)s"
    )

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    logging.basicConfig(
        level=level if level is not None else settings.log_level.upper(),
        format=log_format,
    )
    if not settings.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging initialized")
