"""Catalog persistence, query helpers and the access gate."""

from .access import is_authorized
from .catalog_store import CatalogStore
from .queries import DeleteResult, add_product, delete_by_ids, get_by_id, search_by_title

__all__ = [
    "CatalogStore",
    "DeleteResult",
    "add_product",
    "delete_by_ids",
    "get_by_id",
    "is_authorized",
    "search_by_title",
]
