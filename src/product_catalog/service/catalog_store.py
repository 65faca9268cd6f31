"""Persistence of the whole product catalog as one value in a key-value store."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import redis

from ..config import Settings
from ..data.records import ProductRow, read_products_json, rows_from_json
from .errors import SeedFailure, StoreUnavailable, StoreWriteFailed

logger = logging.getLogger(__name__)

Mutation = Callable[[List[ProductRow]], List[ProductRow]]


def build_client(settings: Settings) -> Optional[redis.Redis]:
    """Create the redis client for ``settings`` or ``None`` if that fails.

    ``redis.from_url`` does not open a connection, so an unreachable server
    only shows up on the first command.
    """

    if not settings.redis_url:
        logger.error("Redis client not initialized: no REDIS_URL configured")
        return None
    try:
        client = redis.from_url(
            settings.redis_url,
            password=settings.redis_token,
            decode_responses=True,
        )
    except ValueError:
        logger.exception("Failed to initialize Redis client")
        return None
    logger.info("Redis client initialized, URL (partial): %s...", settings.redis_url[:15])
    return client


class CatalogStore:
    """Reads and overwrites the full catalog under a single key.

    Every mutation is a read-modify-write of the entire list. Concurrent
    writers are not serialized, so the last ``set`` wins.
    """

    def __init__(self, client: Any, seed_path: Path, key: str = "products") -> None:
        self._client = client
        self.seed_path = seed_path
        self.key = key

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogStore":
        return cls(build_client(settings), settings.seed_path, settings.catalog_key)

    @property
    def ready(self) -> bool:
        return self._client is not None

    def _require_client(self) -> Any:
        if self._client is None:
            logger.error("Redis client not initialized")
            raise StoreUnavailable("Database connection not available")
        return self._client

    def read_catalog(self) -> List[ProductRow]:
        client = self._require_client()
        try:
            raw = client.get(self.key)
        except redis.RedisError as exc:
            logger.error("Error interacting with Redis: %s", exc)
            raise StoreUnavailable("Failed to fetch products from database") from exc

        if not raw:
            logger.info("Catalog is empty, seeding products from %s", self.seed_path)
            try:
                return self._seed_from_file()
            except (SeedFailure, StoreWriteFailed):
                logger.exception("Error seeding products from file")
                return []

        try:
            return rows_from_json(json.loads(raw))
        except ValueError as exc:
            logger.error("Stored catalog under %r is not a JSON array: %s", self.key, exc)
            raise StoreUnavailable("Failed to fetch products from database") from exc

    def write_catalog(self, products: List[ProductRow]) -> None:
        client = self._require_client()
        payload = json.dumps(products)
        try:
            client.set(self.key, payload)
        except redis.RedisError as exc:
            logger.error("Error writing products to Redis: %s", exc)
            raise StoreWriteFailed("Failed to save product data.") from exc

    def mutate(self, change: Mutation) -> Tuple[List[ProductRow], List[ProductRow]]:
        """Apply ``change`` to the current catalog and store the result.

        Returns the catalog as read and as written.
        """

        previous = self.read_catalog()
        updated = change(list(previous))
        self.write_catalog(updated)
        return previous, updated

    def seed(self, force: bool = False) -> List[ProductRow]:
        """Write the seed file into the store unless a catalog already exists."""

        client = self._require_client()
        if not force:
            try:
                existing = client.get(self.key)
            except redis.RedisError as exc:
                raise StoreUnavailable("Failed to fetch products from database") from exc
            if existing:
                logger.info("Catalog already present under %r, not seeding", self.key)
                try:
                    return rows_from_json(json.loads(existing))
                except ValueError as exc:
                    raise StoreUnavailable("Failed to fetch products from database") from exc
        return self._seed_from_file()

    def _seed_from_file(self) -> List[ProductRow]:
        try:
            products = read_products_json(self.seed_path)
        except (OSError, ValueError) as exc:
            raise SeedFailure(f"Could not load seed file {self.seed_path}: {exc}") from exc
        self.write_catalog(products)
        logger.info("Seeded catalog with %d products", len(products))
        return products
