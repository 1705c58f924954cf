"""BeautifulSoup adapter exposing the ``<head>`` of a parsed document."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Comment, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PageElement
from bs4.formatter import HTMLFormatter

from .schema import HeadNode

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"
RAW_TEXT_TAGS = {"script", "style"}
HEAD_CONTENT_TAGS = {"base", "link", "meta", "noscript", "script", "style", "template", "title"}


class HeadFormatter(HTMLFormatter):
    """HTML formatter that keeps attributes in source order."""

    def attributes(self, tag):
        for key, value in tag.attrs.items():
            if self.empty_attributes_are_booleans and value == "":
                value = None
            yield key, value


# Void elements without a trailing slash, bare boolean attributes and
# escaping limited to &, < and > so non-ASCII text is written back as-is.
HEAD_FORMATTER = HeadFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)

_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
# Comments are matched first so an end tag written inside one is skipped.
_HEAD_END_RE = re.compile(r"<!--.*?-->|</(?:head|body|html)\s*>", re.IGNORECASE | re.DOTALL)


class HeadSpliceError(ValueError):
    """Raised when the head contents cannot be located in the source text."""


def _flatten_attributes(attrs: Dict[str, object]) -> Dict[str, str]:
    flattened: Dict[str, str] = {}
    for key, value in attrs.items():
        if isinstance(value, (list, tuple)):
            flattened[key] = " ".join(str(part) for part in value)
        elif value is None:
            flattened[key] = ""
        else:
            flattened[key] = str(value)
    return flattened


def to_head_node(index: int, element: PageElement) -> HeadNode:
    if isinstance(element, Tag):
        return HeadNode.element(index, element.name, _flatten_attributes(element.attrs))
    if isinstance(element, Comment):
        return HeadNode.comment(index, str(element))
    return HeadNode.text_node(index, str(element))


class HeadDocument:
    """Parsed HTML document whose head children can be read and replaced.

    With the default ``html.parser`` backend every tag carries its source
    position, so :meth:`serialize` only rewrites the text between ``<head>``
    and ``</head>`` and leaves the rest of the input byte-for-byte intact.
    Backends without source positions (``lxml``) fall back to serializing the
    whole tree.

    ``</head>`` is optional in HTML. When it is missing, ``html.parser``
    nests the body inside the head; the head then ends at its first child
    that cannot be head content, and that child and its following siblings
    are moved back out after the head.
    """

    def __init__(self, html: str, *, parser: str = DEFAULT_PARSER):
        self.source = html
        self.parser = parser
        self.soup = BeautifulSoup(html, parser)
        self._head: Optional[Tag] = self.soup.find("head")
        self._boundary: Optional[Tag] = None
        if self._head is not None:
            self._boundary = self._find_boundary()
            if self._boundary is not None:
                self._split_at_boundary()
        self._originals: List[PageElement] = list(self._head.contents) if self._head is not None else []
        self._line_starts = [0] + [match.end() for match in re.finditer("\n", html)]

    @classmethod
    def parse(cls, html: str, *, parser: str = DEFAULT_PARSER) -> "HeadDocument":
        return cls(html, parser=parser)

    @property
    def head(self) -> Optional[Tag]:
        return self._head

    @property
    def has_head(self) -> bool:
        return self._head is not None

    def _find_boundary(self) -> Optional[Tag]:
        assert self._head is not None
        closed = _HEAD_CLOSE_RE.search(self.source) is not None
        for element in self._head.contents:
            if not isinstance(element, Tag):
                continue
            if element.name == "body" or (not closed and element.name not in HEAD_CONTENT_TAGS):
                return element
        return None

    def _split_at_boundary(self) -> None:
        assert self._head is not None and self._boundary is not None
        trailing = [self._boundary] + list(self._boundary.next_siblings)
        logger.debug("Unclosed <head>: moving %d nodes from <%s> on out of the head", len(trailing), self._boundary.name)
        anchor = self._head
        for element in trailing:
            anchor.insert_after(element.extract())
            anchor = element

    def children(self) -> List[HeadNode]:
        """Return the head's direct children, in document order, as ``HeadNode``s."""

        return [to_head_node(index, element) for index, element in enumerate(self._originals)]

    def replace_children(self, order: Sequence[HeadNode]) -> None:
        """Replace the head's children with the original nodes named by ``order``."""

        if self._head is None:
            raise ValueError("Document has no <head> element")
        seen = set()
        for node in order:
            if not 0 <= node.index < len(self._originals):
                raise ValueError(f"Head node index out of range: {node.index}")
            if node.index in seen:
                raise ValueError(f"Head node listed twice: {node.index}")
            seen.add(node.index)

        self._head.clear()
        for node in order:
            self._head.append(self._originals[node.index])

    def head_contents(self) -> str:
        if self._head is None:
            return ""
        return self._head.decode_contents(formatter=HEAD_FORMATTER)

    def serialize(self) -> str:
        if self._head is None:
            return self.source
        span = self._head_contents_span()
        if span is None:
            logger.debug("No source positions from parser %s; serializing whole document", self.parser)
            return self.soup.decode(formatter=HEAD_FORMATTER)
        start, end = span
        return self.source[:start] + self.head_contents() + self.source[end:]

    def _offset(self, element: Tag) -> Optional[int]:
        line = getattr(element, "sourceline", None)
        column = getattr(element, "sourcepos", None)
        if line is None or column is None:
            return None
        if not 1 <= line <= len(self._line_starts):
            raise HeadSpliceError(f"<{element.name}> reported line {line} outside the source")
        return self._line_starts[line - 1] + column

    def _head_contents_span(self) -> Optional[Tuple[int, int]]:
        """Locate ``(start, end)`` of the head's inner text in :attr:`source`."""

        assert self._head is not None
        head_offset = self._offset(self._head)
        if head_offset is None:
            return None
        opening = _HEAD_OPEN_RE.match(self.source, head_offset)
        if opening is None:
            raise HeadSpliceError(f"No <head> start tag at offset {head_offset}")

        if self._boundary is not None:
            boundary_offset = self._offset(self._boundary)
            if boundary_offset is None:
                return None
            return opening.end(), boundary_offset

        search_from = opening.end()
        positioned = [(self._offset(tag), tag) for tag in self._head.find_all(True)]
        positioned = [(offset, tag) for offset, tag in positioned if offset is not None]
        if positioned:
            last_offset, last_tag = max(positioned, key=lambda item: item[0])
            search_from = max(search_from, last_offset)
            if last_tag.name in RAW_TEXT_TAGS:
                raw_close = re.compile(rf"</{last_tag.name}\s*>", re.IGNORECASE).search(self.source, search_from)
                if raw_close is not None:
                    search_from = raw_close.end()

        for match in _HEAD_END_RE.finditer(self.source, search_from):
            if not match.group().startswith("<!--"):
                return opening.end(), match.start()
        # Unclosed head running to the end of the input.
        return opening.end(), len(self.source)
