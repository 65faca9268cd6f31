"""Product records and seed-file loading.

Catalog rows are kept exactly as they were stored. Only products created by
this service are built from :class:`Product`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

PLACEHOLDER_IMAGE_URL = (
    "https://upload.wikimedia.org/wikipedia/commons/1/14/No_Image_Available.jpg"
)

ProductRow = Dict[str, Any]


@dataclass
class Product:
    id: str
    title: str
    image_url: str = PLACEHOLDER_IMAGE_URL
    description: str = ""
    product_url: str = ""

    def to_dict(self) -> ProductRow:
        return {
            "id": self.id,
            "title": self.title,
            "imageUrl": self.image_url,
            "description": self.description,
            "productUrl": self.product_url,
        }


def row_field(row: Any, name: str) -> Optional[Any]:
    if isinstance(row, Mapping):
        return row.get(name)
    return None


def rows_from_json(raw: Any) -> List[ProductRow]:
    if not isinstance(raw, list):
        raise ValueError(f"expected a JSON array of products, got {type(raw).__name__}")
    return raw


def read_products_json(path: Path) -> List[ProductRow]:
    with path.open(encoding="utf-8") as handle:
        raw = json.load(handle)
    return rows_from_json(raw)
