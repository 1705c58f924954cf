"""Per-file batch results as CSV rows (flattened with pandas) or JSON records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .batch import BatchItem


def items_to_records(items: Iterable[BatchItem]) -> List[dict]:
    return [item.to_dict() for item in items]


def items_to_dataframe(items: Iterable[BatchItem]) -> pd.DataFrame:
    """One row per file; nested category counts become dotted columns."""

    records = []
    for record in items_to_records(items):
        # One CSV cell per file for the output order.
        order = record.pop("order", None)
        if order is not None:
            record["order"] = " ".join(order)
        records.append(record)
    return pd.json_normalize(records)


def export_csv(items: Iterable[BatchItem], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    items_to_dataframe(items).to_csv(path, index=False)
    return path


def export_json(items: Iterable[BatchItem], path: Path) -> Path:
    """Write the unflattened records, keeping ``order`` as a list."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(items_to_records(items), indent=2, ensure_ascii=False), encoding="utf-8")
    return path
