import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import redis

from product_catalog.service.catalog_store import CatalogStore

SEED_PRODUCTS = [
    {
        "id": "100",
        "title": "Blue Shirt",
        "imageUrl": "https://img.example.com/blue-shirt.jpg",
        "description": "Cotton shirt",
        "productUrl": "https://shop.example.com/blue-shirt",
    },
    {
        "id": "200",
        "title": "Red Scarf",
        "imageUrl": "https://img.example.com/red-scarf.jpg",
        "description": "",
        "productUrl": "https://shop.example.com/red-scarf",
    },
    {
        "id": "300",
        "title": "Green SHIRT dress",
        "imageUrl": "https://img.example.com/green-dress.jpg",
        "description": "Midi length",
        "productUrl": "https://shop.example.com/green-dress",
    },
]


class FakeRedis:
    """In-memory stand-in for the two redis commands the store issues."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.set_calls = 0
        self.fail_get = False
        self.fail_set = False

    def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise redis.exceptions.ConnectionError("connection refused")
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.fail_set:
            raise redis.exceptions.ConnectionError("connection reset")
        self.set_calls += 1
        self.data[key] = value
        return True

    def stored(self, key: str = "products") -> List[dict]:
        return json.loads(self.data[key])


@pytest.fixture()
def seed_path(tmp_path: Path) -> Path:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(SEED_PRODUCTS))
    return path


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def store(fake_redis: FakeRedis, seed_path: Path) -> CatalogStore:
    return CatalogStore(fake_redis, seed_path)
