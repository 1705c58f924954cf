"""Category catalogs describing the canonical order of ``<head>`` children.

The default catalog follows the ordering popularised by capo.js: the
character set and other document-level metadata come first, then resource
hints, blocking scripts and styles, preloads, non-blocking scripts and
finally everything the browser does not need early.

Each :class:`Category` carries a predicate over ``(tag_name, attributes)``.
Predicates are *not* mutually exclusive (``<script type="module" defer>``
matches both the async/module and the defer rule), so the position of a
category inside its catalog is what decides membership: the first matching
predicate wins.

Two catalog variants exist. ``scripts-first`` (the default) puts inline
classic scripts ahead of inline styles and stylesheets; ``styles-first``
moves the inline script after the stylesheet group. Everything else is
identical between the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Sequence, Tuple

Attributes = Mapping[str, str]
Predicate = Callable[[str, Attributes], bool]

PRELOAD_AS_STYLE = "style"
PRELOAD_AS_SCRIPT = "script"
RESOURCE_HINT_RELS = frozenset({"preconnect", "dns-prefetch"})
PREFETCH_LIKE_RELS = frozenset({"prefetch", "prerender", "manifest", "icon", "apple-touch-icon"})


@dataclass(frozen=True)
class Category:
    """One entry of an ordering catalog."""

    name: str
    description: str
    predicate: Predicate
    catch_all: bool = False

    def matches(self, tag_name: str, attributes: Attributes) -> bool:
        return self.catch_all or self.predicate(tag_name, attributes)


def attribute_value(attributes: Attributes, name: str) -> str | None:
    """Return a normalized (stripped, lower-case) attribute value or ``None``."""

    value = attributes.get(name)
    if value is None:
        return None
    return value.strip().lower()


def _is_classic_script(attributes: Attributes) -> bool:
    return "async" not in attributes and "defer" not in attributes


def _meta_charset(tag: str, attrs: Attributes) -> bool:
    return tag == "meta" and "charset" in attrs


def _meta_http_equiv(tag: str, attrs: Attributes) -> bool:
    return tag == "meta" and "http-equiv" in attrs


def _meta_viewport(tag: str, attrs: Attributes) -> bool:
    return tag == "meta" and attribute_value(attrs, "name") == "viewport"


def _base(tag: str, attrs: Attributes) -> bool:
    return tag == "base"


def _title(tag: str, attrs: Attributes) -> bool:
    return tag == "title"


def _script_importmap(tag: str, attrs: Attributes) -> bool:
    return tag == "script" and attribute_value(attrs, "type") == "importmap"


def _link_preconnect(tag: str, attrs: Attributes) -> bool:
    return tag == "link" and attribute_value(attrs, "rel") in RESOURCE_HINT_RELS


def _script_inline_plain(tag: str, attrs: Attributes) -> bool:
    if tag != "script" or "src" in attrs or not _is_classic_script(attrs):
        return False
    return attribute_value(attrs, "type") not in ("module", "importmap")


def _style(tag: str, attrs: Attributes) -> bool:
    return tag == "style"


def _is_preload(tag: str, attrs: Attributes) -> bool:
    return tag == "link" and attribute_value(attrs, "rel") == "preload"


def _link_preload_style(tag: str, attrs: Attributes) -> bool:
    return _is_preload(tag, attrs) and attribute_value(attrs, "as") == PRELOAD_AS_STYLE


def _link_stylesheet(tag: str, attrs: Attributes) -> bool:
    return tag == "link" and attribute_value(attrs, "rel") == "stylesheet"


def _link_preload_script(tag: str, attrs: Attributes) -> bool:
    if tag != "link":
        return False
    if attribute_value(attrs, "rel") == "modulepreload":
        return True
    return _is_preload(tag, attrs) and attribute_value(attrs, "as") == PRELOAD_AS_SCRIPT


def _link_preload_other(tag: str, attrs: Attributes) -> bool:
    return _is_preload(tag, attrs) and attribute_value(attrs, "as") not in (PRELOAD_AS_STYLE, PRELOAD_AS_SCRIPT)


def _script_src_plain(tag: str, attrs: Attributes) -> bool:
    if tag != "script" or "src" not in attrs or not _is_classic_script(attrs):
        return False
    return attribute_value(attrs, "type") != "module"


def _script_async_or_module(tag: str, attrs: Attributes) -> bool:
    return tag == "script" and ("async" in attrs or attribute_value(attrs, "type") == "module")


def _script_defer(tag: str, attrs: Attributes) -> bool:
    return tag == "script" and "defer" in attrs


def _meta_other(tag: str, attrs: Attributes) -> bool:
    return tag == "meta"


def _link_prefetch_like(tag: str, attrs: Attributes) -> bool:
    return tag == "link" and attribute_value(attrs, "rel") in PREFETCH_LIKE_RELS


def _anything(tag: str, attrs: Attributes) -> bool:
    return True


META_CHARSET = Category("meta-charset", "<meta charset>", _meta_charset)
META_HTTP_EQUIV = Category("meta-http-equiv", "<meta http-equiv> (content-type, CSP, compatibility)", _meta_http_equiv)
META_VIEWPORT = Category("meta-viewport", '<meta name="viewport">', _meta_viewport)
BASE = Category("base", "<base>", _base)
TITLE = Category("title", "<title>", _title)
SCRIPT_IMPORTMAP = Category("script-importmap", '<script type="importmap">', _script_importmap)
LINK_PRECONNECT = Category("link-preconnect", "preconnect / dns-prefetch resource hints", _link_preconnect)
SCRIPT_INLINE_PLAIN = Category("script-inline-plain", "inline classic scripts without async/defer", _script_inline_plain)
STYLE = Category("style", "inline <style> blocks", _style)
LINK_PRELOAD_STYLE = Category("link-preload-style", 'preload as="style"', _link_preload_style)
LINK_STYLESHEET = Category("link-stylesheet", '<link rel="stylesheet">', _link_stylesheet)
LINK_PRELOAD_SCRIPT = Category("link-preload-script", 'modulepreload / preload as="script"', _link_preload_script)
LINK_PRELOAD_OTHER = Category("link-preload-other", "preloads of fonts, images and other resources", _link_preload_other)
SCRIPT_SRC_PLAIN = Category("script-src-plain", "external classic scripts without async/defer", _script_src_plain)
SCRIPT_ASYNC_OR_MODULE = Category("script-async-or-module", "async scripts and module scripts", _script_async_or_module)
SCRIPT_DEFER = Category("script-defer", "deferred scripts", _script_defer)
META_OTHER = Category("meta-other", "remaining <meta> tags", _meta_other)
LINK_PREFETCH_LIKE = Category("link-prefetch-like", "prefetch, prerender, manifest and icon links", _link_prefetch_like)
OTHER = Category("other", "everything else (noscript, templates, custom elements, stray text)", _anything, catch_all=True)

_LEADING: Tuple[Category, ...] = (
    META_CHARSET,
    META_HTTP_EQUIV,
    META_VIEWPORT,
    BASE,
    TITLE,
    SCRIPT_IMPORTMAP,
    LINK_PRECONNECT,
)

_TRAILING: Tuple[Category, ...] = (
    LINK_PRELOAD_SCRIPT,
    LINK_PRELOAD_OTHER,
    SCRIPT_SRC_PLAIN,
    SCRIPT_ASYNC_OR_MODULE,
    SCRIPT_DEFER,
    META_OTHER,
    LINK_PREFETCH_LIKE,
    OTHER,
)

SCRIPTS_FIRST_CATALOG: Tuple[Category, ...] = (
    _LEADING + (SCRIPT_INLINE_PLAIN, STYLE, LINK_PRELOAD_STYLE, LINK_STYLESHEET) + _TRAILING
)

STYLES_FIRST_CATALOG: Tuple[Category, ...] = (
    _LEADING + (STYLE, LINK_PRELOAD_STYLE, LINK_STYLESHEET, SCRIPT_INLINE_PLAIN) + _TRAILING
)

DEFAULT_CATALOG_NAME = "scripts-first"
DEFAULT_CATALOG = SCRIPTS_FIRST_CATALOG

CATALOGS: Dict[str, Tuple[Category, ...]] = {
    "scripts-first": SCRIPTS_FIRST_CATALOG,
    "styles-first": STYLES_FIRST_CATALOG,
}


def get_catalog(name: str) -> Tuple[Category, ...]:
    """Return a registered catalog by name (case-insensitive)."""

    normalized = name.strip().lower()
    try:
        return CATALOGS[normalized]
    except KeyError:
        known = ", ".join(sorted(CATALOGS))
        raise ValueError(f"Unknown catalog '{name}' (expected one of: {known})") from None


def validate_catalog(catalog: Sequence[Category]) -> Tuple[Category, ...]:
    """Check that ``catalog`` can classify every node and return it as a tuple."""

    entries = tuple(catalog)
    if not entries:
        raise ValueError("Catalog must contain at least one category")
    seen = set()
    for category in entries:
        if category.name in seen:
            raise ValueError(f"Duplicate category name in catalog: {category.name}")
        seen.add(category.name)
    if not entries[-1].catch_all:
        raise ValueError(f"Catalog must end with a catch-all category, got '{entries[-1].name}'")
    return entries
