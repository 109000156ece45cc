"""Threadline: data-access layer for a threaded social feed."""

__version__ = "0.1.0"
