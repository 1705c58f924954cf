"""Batch processing helpers."""

from __future__ import annotations

import csv
import dataclasses
import json
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .ordering.stats import merge_category_stats
from .pipeline import HeadOrderer, ReorderResult

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class BatchItem:
    path: Path
    result: Optional[ReorderResult] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        payload: dict = {"path": str(self.path)}
        if self.output_path is not None:
            payload["output_path"] = str(self.output_path)
        if self.result is not None:
            payload.update(self.result.to_dict())
        if self.error is not None:
            payload["error"] = self.error
        return payload


def read_paths(path: Path) -> List[Path]:
    """Read the list of HTML files to process from a txt/csv/json list file.

    Relative entries are resolved against the list file's directory.
    """

    if not path.exists():
        raise FileNotFoundError(path)
    base = path.parent
    if path.suffix in {".txt", ""}:
        entries = [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    elif path.suffix == ".csv":
        with path.open(newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames or "path" not in reader.fieldnames:
                raise ValueError("CSV must contain a 'path' column")
            entries = [row["path"] for row in reader if row.get("path")]
    elif path.suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("JSON batch file must be a list")
        entries = []
        for item in data:
            if isinstance(item, dict):
                if "path" not in item:
                    raise ValueError(f"JSON batch entry without 'path': {item}")
                entries.append(str(item["path"]))
            else:
                entries.append(str(item))
    else:
        raise ValueError(f"Unsupported batch file format: {path.suffix}")
    return [Path(entry) if Path(entry).is_absolute() else base / entry for entry in entries]


def _destination(path: Path, *, output_dir: Optional[Path], in_place: bool) -> Optional[Path]:
    if in_place:
        return path
    if output_dir is not None:
        return output_dir / path.name
    return None


def run_batch(
    paths: Iterable[Path],
    orderer: HeadOrderer,
    *,
    output_dir: Optional[Path] = None,
    in_place: bool = False,
    on_result: Callable[[BatchItem, int], None] | None = None,
) -> List[BatchItem]:
    """Reorder every file in ``paths``; unreadable files are recorded, not raised."""

    items: List[BatchItem] = []
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
    for index, path in enumerate(paths):
        item = BatchItem(path=path)
        try:
            html = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            item.error = f"{type(exc).__name__}: {exc}"
        else:
            item.result = orderer.process(html)
            destination = _destination(path, output_dir=output_dir, in_place=in_place)
            if destination is not None and (item.result.changed or destination != path):
                destination.write_text(item.result.html, encoding="utf-8")
                item.output_path = destination
            logger.info(
                "[%s] %s: head_found=%s changed=%s",
                index + 1,
                path,
                item.result.head_found,
                item.result.changed,
            )
        items.append(item)
        if on_result is not None:
            on_result(item, index)
    return items


def run_batch_from_file(path: Path, orderer: HeadOrderer, **kwargs) -> List[BatchItem]:
    return run_batch(read_paths(path), orderer, **kwargs)


def summarize_batch(items: Iterable[BatchItem]) -> dict:
    """Aggregate batch items into the summary structure written by the CLI."""

    item_list = list(items)
    processed = [item for item in item_list if item.result is not None]
    return {
        "count": len(item_list),
        "processed": len(processed),
        "changed": sum(1 for item in processed if item.result.changed),
        "no_head": sum(1 for item in processed if not item.result.head_found),
        "skipped": sum(1 for item in processed if item.result.skipped_reason),
        "failed": sum(1 for item in item_list if not item.ok),
        "categories": merge_category_stats(item.result.category_counts for item in processed),
    }
