"""Map ``<head>`` children on to catalog categories."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..schema import HeadNode
from .categories import DEFAULT_CATALOG, Category


def classify(node: HeadNode, catalog: Sequence[Category] = DEFAULT_CATALOG) -> int:
    """Return the index of the first category in ``catalog`` matching ``node``.

    The scan is first-match-wins, so catalog order is the tie-break between
    overlapping predicates. Nodes that are not elements (stray non-blank text
    inside ``<head>``) and elements no predicate accepts land in the last
    entry, which must be the catch-all.
    """

    fallback = len(catalog) - 1
    if not node.is_element or node.tag_name is None:
        return fallback
    for index, category in enumerate(catalog):
        if category.matches(node.tag_name, node.attributes):
            return index
    return fallback


def classify_nodes(
    nodes: Iterable[HeadNode], catalog: Sequence[Category] = DEFAULT_CATALOG
) -> List[Tuple[HeadNode, int]]:
    return [(node, classify(node, catalog)) for node in nodes]


def category_name(index: int, catalog: Sequence[Category] = DEFAULT_CATALOG) -> str:
    return catalog[index].name
