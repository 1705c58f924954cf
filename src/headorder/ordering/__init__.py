"""Category catalogs and classification of ``<head>`` children."""

from .categories import (
    CATALOGS,
    DEFAULT_CATALOG,
    DEFAULT_CATALOG_NAME,
    SCRIPTS_FIRST_CATALOG,
    STYLES_FIRST_CATALOG,
    Category,
    get_catalog,
    validate_catalog,
)
from .classifier import category_name, classify, classify_nodes
from .stats import compute_category_stats, merge_category_stats

__all__ = [
    "CATALOGS",
    "DEFAULT_CATALOG",
    "DEFAULT_CATALOG_NAME",
    "SCRIPTS_FIRST_CATALOG",
    "STYLES_FIRST_CATALOG",
    "Category",
    "get_catalog",
    "validate_catalog",
    "category_name",
    "classify",
    "classify_nodes",
    "compute_category_stats",
    "merge_category_stats",
]
