"""Lookup, search and mutation helpers built on top of :class:`CatalogStore`.

Rows are matched on their stored ``id`` without type coercion, and rows
that a mutation does not target are written back untouched.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..data.records import PLACEHOLDER_IMAGE_URL, Product, ProductRow, row_field
from .catalog_store import CatalogStore
from .errors import CatalogError, DeleteFailed

logger = logging.getLogger(__name__)


@dataclass
class DeleteResult:
    deleted_count: int
    deleted_ids: List[Any]
    remaining_count: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "deletedCount": self.deleted_count,
            "deletedIds": self.deleted_ids,
            "remainingCount": self.remaining_count,
        }


def new_product_id(now: Optional[float] = None) -> str:
    # Millisecond timestamps; two creates in the same millisecond collide.
    seconds = time.time() if now is None else now
    return str(int(seconds * 1000))


def get_by_id(store: CatalogStore, product_id: str) -> Optional[ProductRow]:
    for row in store.read_catalog():
        if row_field(row, "id") == product_id:
            return row
    return None


def search_by_title(store: CatalogStore, term: Optional[str]) -> List[ProductRow]:
    rows = store.read_catalog()
    if not term:
        return rows
    needle = term.lower()
    matches = []
    for row in rows:
        title = row_field(row, "title")
        if isinstance(title, str) and needle in title.lower():
            matches.append(row)
    return matches


def add_product(
    store: CatalogStore,
    title: str,
    product_url: str,
    image_url: Optional[str] = None,
    description: Optional[str] = None,
    now: Optional[float] = None,
) -> Product:
    """Append a new product built from the request fields and persist the catalog."""

    product = Product(
        id=new_product_id(now),
        title=title,
        image_url=image_url or PLACEHOLDER_IMAGE_URL,
        description=description or "",
        product_url=product_url,
    )
    store.mutate(lambda rows: rows + [product.to_dict()])
    return product


def delete_by_ids(store: CatalogStore, ids: Iterable[Any]) -> DeleteResult:
    doomed = list(ids)
    try:
        previous, remaining = store.mutate(
            lambda rows: [row for row in rows if row_field(row, "id") not in doomed]
        )
    except CatalogError as exc:
        logger.error("Error deleting products: %s", exc)
        raise DeleteFailed("Failed to delete products") from exc

    deleted_ids = [row_field(row, "id") for row in previous if row_field(row, "id") in doomed]
    return DeleteResult(
        deleted_count=len(deleted_ids),
        deleted_ids=deleted_ids,
        remaining_count=len(remaining),
    )
