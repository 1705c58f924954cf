"""Node schema definitions for head reordering."""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Mapping, Optional

ELEMENT = "element"
TEXT = "text"
COMMENT = "comment"

NODE_KINDS = (ELEMENT, TEXT, COMMENT)


@dataclasses.dataclass(frozen=True, eq=False)
class HeadNode:
    """Read-only view of one direct child of ``<head>``.

    ``index`` is the node's position in the original child list and is the
    only identity the ordering code relies on: two nodes with the same tag and
    attributes are still distinct because their indices differ.
    """

    index: int
    kind: str
    tag_name: Optional[str] = None
    attributes: Mapping[str, str] = dataclasses.field(default_factory=dict)
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in NODE_KINDS:
            raise ValueError(f"Unknown node kind: {self.kind}")

    @property
    def is_element(self) -> bool:
        return self.kind == ELEMENT

    @property
    def is_comment(self) -> bool:
        return self.kind == COMMENT

    @property
    def is_whitespace(self) -> bool:
        return self.kind == TEXT and not (self.text or "").strip()

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "index": self.index,
            "kind": self.kind,
            "tag": self.tag_name,
            "attributes": dict(self.attributes),
            "text": self.text,
        }
        return {k: v for k, v in data.items() if v not in (None, {})}

    @classmethod
    def element(cls, index: int, tag_name: str, attributes: Optional[Mapping[str, str]] = None) -> "HeadNode":
        attrs = {key.lower(): value for key, value in (attributes or {}).items()}
        return cls(index=index, kind=ELEMENT, tag_name=tag_name.lower(), attributes=attrs)

    @classmethod
    def text_node(cls, index: int, text: str) -> "HeadNode":
        return cls(index=index, kind=TEXT, text=text)

    @classmethod
    def comment(cls, index: int, text: str) -> "HeadNode":
        return cls(index=index, kind=COMMENT, text=text)
