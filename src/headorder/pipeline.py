"""High-level pipeline: parse, reorder the head and serialize back to text."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional

from .document import DEFAULT_PARSER, HeadDocument, HeadSpliceError
from .ordering.classifier import classify, classify_nodes
from .ordering.stats import compute_category_stats
from .partition import ReorderOptions, reorder
from .schema import HeadNode

logger = logging.getLogger(__name__)

COMMENT_LABEL = "comment"


@dataclasses.dataclass
class ReorderResult:
    html: str
    head_found: bool
    changed: bool = False
    input_count: int = 0
    output_count: int = 0
    dropped_whitespace: int = 0
    dropped_comments: int = 0
    category_counts: Dict[str, dict] = dataclasses.field(default_factory=dict)
    order: List[str] = dataclasses.field(default_factory=list)
    skipped_reason: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {
            "head_found": self.head_found,
            "changed": self.changed,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "dropped_whitespace": self.dropped_whitespace,
            "dropped_comments": self.dropped_comments,
            "category_counts": self.category_counts,
            "order": self.order,
        }
        if self.skipped_reason:
            payload["skipped_reason"] = self.skipped_reason
        return payload


class HeadOrderer:
    """Reorder ``<head>`` children of HTML documents into catalog order."""

    def __init__(self, options: Optional[ReorderOptions] = None, *, parser: str = DEFAULT_PARSER):
        self.options = options or ReorderOptions()
        self.parser = parser

    def label(self, node: HeadNode) -> str:
        if node.is_comment:
            return COMMENT_LABEL
        return self.options.catalog[classify(node, self.options.catalog)].name

    def reorder_document(self, document: HeadDocument) -> Optional[List[HeadNode]]:
        """Reorder an already parsed document in place.

        Returns the new child order, or ``None`` when the document has no head.
        """

        if not document.has_head:
            return None
        ordered = reorder(document.children(), self.options)
        document.replace_children(ordered)
        return ordered

    def process(self, html: str) -> ReorderResult:
        document = HeadDocument.parse(html, parser=self.parser)
        nodes = document.children()
        ordered = self.reorder_document(document)
        if ordered is None:
            logger.debug("No <head> element found; leaving document unchanged")
            return ReorderResult(html=html, head_found=False)

        whitespace = sum(1 for node in nodes if node.is_whitespace)
        comments = sum(1 for node in nodes if node.is_comment)
        assignments = classify_nodes((node for node in ordered if not node.is_comment), self.options.catalog)
        result = ReorderResult(
            html=html,
            head_found=True,
            input_count=len(nodes),
            output_count=len(ordered),
            dropped_whitespace=whitespace,
            dropped_comments=comments if self.options.drop_comments else 0,
            category_counts=compute_category_stats(assignments, self.options.catalog)["per_category"],
            order=[self.label(node) for node in ordered],
        )

        try:
            output = document.serialize()
        except HeadSpliceError as exc:
            logger.warning("Leaving document unchanged, head could not be rewritten: %s", exc)
            result.skipped_reason = str(exc)
            return result

        result.html = output
        result.changed = output != html
        return result

    def reorder_html(self, html: str) -> str:
        return self.process(html).html


def reorder_head(html: str, options: Optional[ReorderOptions] = None) -> str:
    """Return ``html`` with the direct children of ``<head>`` in canonical order."""

    return HeadOrderer(options).reorder_html(html)
