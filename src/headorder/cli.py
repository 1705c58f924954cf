"""Typer-based CLI for reordering ``<head>`` sections."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .batch import BatchItem, run_batch_from_file, summarize_batch
from .document import DEFAULT_PARSER, HeadDocument
from .ordering.categories import CATALOGS, DEFAULT_CATALOG_NAME, get_catalog
from .ordering.classifier import classify
from .partition import ReorderOptions
from .pipeline import HeadOrderer
from .reporting import export_csv, export_json

app = typer.Typer(help="Reorder the children of <head> into a canonical, performance-friendly order.")
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_OUTPUT_ROOT = Path("data/output")


def _catalog_callback(value: str) -> str:
    try:
        get_catalog(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return value


def _create_orderer(catalog: str, keep_comments: bool, parser: str = DEFAULT_PARSER) -> HeadOrderer:
    options = ReorderOptions(drop_comments=not keep_comments, catalog=get_catalog(catalog))
    return HeadOrderer(options, parser=parser)


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


def _slugify(value: str) -> str:
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", value).strip("_")
    return cleaned or "batch"


def _write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


@app.command()
def reorder(
    html_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML file to reorder"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", dir_okay=False, help="Write the result here instead of stdout"),
    in_place: bool = typer.Option(False, "--in-place", help="Overwrite the input file"),
    keep_comments: bool = typer.Option(False, "--keep-comments", help="Move comments to the end of <head> instead of dropping them"),
    catalog: str = typer.Option(DEFAULT_CATALOG_NAME, "--catalog", callback=_catalog_callback, help="Category order variant"),
    parser: str = typer.Option(DEFAULT_PARSER, "--parser", help="BeautifulSoup parser backend"),
) -> None:
    """Reorder the head of a single HTML file."""
    if in_place and output is not None:
        raise typer.BadParameter("--in-place and --output are mutually exclusive")
    orderer = _create_orderer(catalog, keep_comments, parser)
    result = orderer.process(html_path.read_text(encoding="utf-8"))
    if not result.head_found:
        logger.info("%s has no <head>; nothing to reorder", html_path)

    destination = html_path if in_place else output
    if destination is None:
        typer.echo(result.html, nl=False)
        return
    if destination != html_path or result.changed:
        destination.write_text(result.html, encoding="utf-8")
    logger.info("Wrote %s (changed=%s)", destination, result.changed)


@app.command("classify")
def classify_head(
    html_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML file to inspect"),
    catalog: str = typer.Option(DEFAULT_CATALOG_NAME, "--catalog", callback=_catalog_callback, help="Category order variant"),
    parser: str = typer.Option(DEFAULT_PARSER, "--parser", help="BeautifulSoup parser backend"),
) -> None:
    """Print the category of every head child, in document order.

    Columns: 1-based position among non-whitespace children, 1-based rank of
    the category in the catalog (``-`` for comments), category name, node.
    """
    entries = get_catalog(catalog)
    document = HeadDocument.parse(html_path.read_text(encoding="utf-8"), parser=parser)
    if not document.has_head:
        typer.echo(f"{html_path}: no <head> element", err=True)
        raise typer.Exit(code=1)
    typer.echo("position\trank\tcategory\tnode")
    nodes = [node for node in document.children() if not node.is_whitespace]
    for position, node in enumerate(nodes, start=1):
        if node.is_comment:
            text = " ".join((node.text or "").split())
            typer.echo(f"{position}\t-\tcomment\t<!-- {text} -->")
            continue
        index = classify(node, entries)
        label = f"<{node.tag_name}>" if node.tag_name else "#text"
        typer.echo(f"{position}\t{index + 1}\t{entries[index].name}\t{label}")


@app.command()
def batch(
    batch_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text/CSV/JSON list of HTML files"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", file_okay=False, help="Write reordered files here"),
    in_place: bool = typer.Option(False, "--in-place", help="Overwrite the listed files"),
    keep_comments: bool = typer.Option(False, "--keep-comments", help="Move comments to the end of <head> instead of dropping them"),
    catalog: str = typer.Option(DEFAULT_CATALOG_NAME, "--catalog", callback=_catalog_callback, help="Category order variant"),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", file_okay=False, help="Where to write summary/results"),
) -> None:
    """Reorder a list of HTML files and persist summary/records."""
    if in_place and output_dir is not None:
        raise typer.BadParameter("--in-place and --output-dir are mutually exclusive")
    orderer = _create_orderer(catalog, keep_comments)
    run_dir = report_dir or _OUTPUT_ROOT / "batch" / _slugify(batch_file.stem) / _timestamp()
    run_dir.mkdir(parents=True, exist_ok=True)

    def _log_failure(item: BatchItem, index: int) -> None:
        if not item.ok:
            logger.error("[%s] %s failed: %s", index + 1, item.path, item.error)

    items = run_batch_from_file(batch_file, orderer, output_dir=output_dir, in_place=in_place, on_result=_log_failure)
    summary = summarize_batch(items)
    _write_json(run_dir / "summary.json", summary)
    export_json(items, run_dir / "results.json")
    export_csv(items, run_dir / "results.csv")
    typer.echo(f"Processed {summary['processed']}/{summary['count']} files, {summary['changed']} changed; report in {run_dir}")


@app.command()
def catalogs() -> None:
    """List the available category orders."""
    for name, entries in CATALOGS.items():
        marker = " (default)" if name == DEFAULT_CATALOG_NAME else ""
        typer.echo(f"{name}{marker}")
        for position, category in enumerate(entries, start=1):
            typer.echo(f"  {position:2d}. {category.name}: {category.description}")


if __name__ == "__main__":
    app()
