"""Static content catalogs for cases and dialogue."""

from .tables import CatalogItem, ContentError, ContentTables, load_content, parse_content

__all__ = [
    "CatalogItem",
    "ContentError",
    "ContentTables",
    "load_content",
    "parse_content",
]
