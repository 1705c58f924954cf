"""Stable partition of ``<head>`` children into catalog order."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .ordering.categories import DEFAULT_CATALOG, Category, validate_catalog
from .ordering.classifier import classify
from .schema import HeadNode

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ReorderOptions:
    """Configuration for a reorder pass.

    ``drop_comments`` removes comments from the head entirely; when it is
    false, comments are kept and moved to a terminal bucket after every
    catalog category, in their original relative order.
    """

    drop_comments: bool = True
    catalog: Sequence[Category] = DEFAULT_CATALOG

    def __post_init__(self) -> None:
        self.catalog = validate_catalog(self.catalog)


def strip_insignificant(nodes: Iterable[HeadNode], *, drop_comments: bool = True) -> List[HeadNode]:
    """Drop whitespace-only text nodes (and comments when ``drop_comments``)."""

    kept: List[HeadNode] = []
    for node in nodes:
        if node.is_whitespace:
            continue
        if drop_comments and node.is_comment:
            continue
        kept.append(node)
    return kept


def partition(
    nodes: Iterable[HeadNode], catalog: Sequence[Category] = DEFAULT_CATALOG
) -> Tuple[List[List[HeadNode]], List[HeadNode]]:
    """Split ``nodes`` into one bucket per catalog entry plus a comment bucket.

    Buckets are filled in input order, which keeps the partition stable.
    Comments never go through the classifier; they are collected into the
    second return value.
    """

    buckets: List[List[HeadNode]] = [[] for _ in catalog]
    comments: List[HeadNode] = []
    for node in nodes:
        if node.is_comment:
            comments.append(node)
            continue
        buckets[classify(node, catalog)].append(node)
    return buckets, comments


def flatten(buckets: Iterable[List[HeadNode]], comments: Iterable[HeadNode] = ()) -> List[HeadNode]:
    ordered: List[HeadNode] = []
    for bucket in buckets:
        ordered.extend(bucket)
    ordered.extend(comments)
    return ordered


def reorder(nodes: Sequence[HeadNode], options: Optional[ReorderOptions] = None) -> List[HeadNode]:
    """Return ``nodes`` in canonical order without touching the inputs."""

    options = options or ReorderOptions()
    significant = strip_insignificant(nodes, drop_comments=options.drop_comments)
    buckets, comments = partition(significant, options.catalog)
    ordered = flatten(buckets, comments)
    logger.debug(
        "Reordered %s head nodes (%s after pre-pass, %s comments kept)",
        len(nodes),
        len(ordered),
        len(comments),
    )
    return ordered
