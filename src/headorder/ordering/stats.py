"""Helpers to measure category distributions of reordered heads."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from ..schema import HeadNode
from .categories import DEFAULT_CATALOG, Category


@dataclass
class CategoryStats:
    count: int = 0

    def add(self, *, count: int = 0) -> None:
        self.count += count


def _finalize(totals: Mapping[str, CategoryStats], total_count: int) -> Dict[str, dict]:
    per_category = {}
    for key, stats in totals.items():
        entry: Dict[str, float] = {"count": stats.count}
        if total_count:
            entry["count_ratio"] = stats.count / total_count
        per_category[key] = entry
    return {
        "per_category": per_category,
        "totals": {"count": total_count},
    }


def compute_category_stats(
    assignments: Iterable[Tuple[HeadNode, int]],
    catalog: Sequence[Category] = DEFAULT_CATALOG,
) -> Dict[str, dict]:
    """Return raw/normalized counts per category for a single head.

    ``assignments`` is the ``(node, category_index)`` sequence produced by
    :func:`~headorder.ordering.classifier.classify_nodes`. Categories are
    reported in catalog order and empty categories are omitted::

        {
            "per_category": {
                "meta-charset": {"count": 1, "count_ratio": 0.1},
                ...
            },
            "totals": {"count": 10}
        }
    """

    counts: Dict[int, int] = defaultdict(int)
    total_count = 0
    for _node, index in assignments:
        counts[index] += 1
        total_count += 1

    totals: Dict[str, CategoryStats] = {}
    for index in sorted(counts):
        totals[catalog[index].name] = CategoryStats(count=counts[index])
    return _finalize(totals, total_count)


def merge_category_stats(stats_list: Iterable[Mapping[str, dict]]) -> Dict[str, dict]:
    """Aggregate multiple ``per_category`` maps into a single distribution."""

    agg: Dict[str, CategoryStats] = defaultdict(CategoryStats)
    total_count = 0

    for stats in stats_list:
        for key, value in stats.items():
            count = int(value.get("count", 0))
            agg[key].add(count=count)
            total_count += count

    return _finalize(agg, total_count)
