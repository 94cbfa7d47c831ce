"""CLI command modules."""

from . import catalog, reservation

__all__ = [
    "catalog",
    "reservation",
]
