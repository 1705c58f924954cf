"""Reorder the children of an HTML ``<head>`` into a canonical order."""

from .partition import ReorderOptions, reorder
from .pipeline import HeadOrderer, ReorderResult, reorder_head

__all__ = [
    "HeadOrderer",
    "ReorderOptions",
    "ReorderResult",
    "reorder",
    "reorder_head",
]
