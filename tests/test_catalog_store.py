import json
from pathlib import Path

import pytest

from product_catalog.config import Settings
from product_catalog.service.catalog_store import CatalogStore
from product_catalog.service.errors import StoreUnavailable, StoreWriteFailed

from conftest import SEED_PRODUCTS

LAMP = {"id": "1", "title": "Lamp", "productUrl": "https://shop.example.com/lamp"}


def test_first_read_seeds_store_from_file(store, fake_redis) -> None:
    products = store.read_catalog()

    assert products == SEED_PRODUCTS
    assert fake_redis.stored() == SEED_PRODUCTS
    assert fake_redis.set_calls == 1


def test_seeding_happens_once(store, fake_redis) -> None:
    first = store.read_catalog()
    second = store.read_catalog()

    assert first == second
    assert fake_redis.set_calls == 1


def test_stored_rows_are_returned_as_is(store, fake_redis) -> None:
    rows = [{"id": 7, "title": "Lamp", "sku": "L-7"}, {"id": "8", "productUrl": "u"}]
    fake_redis.data["products"] = json.dumps(rows)

    assert store.read_catalog() == rows


def test_stored_empty_catalog_is_not_reseeded(store, fake_redis) -> None:
    store.write_catalog([])

    assert store.read_catalog() == []
    assert fake_redis.set_calls == 1


def test_missing_seed_file_yields_empty_catalog(fake_redis, tmp_path: Path) -> None:
    store = CatalogStore(fake_redis, tmp_path / "absent.json")

    assert store.read_catalog() == []
    assert fake_redis.data == {}


def test_malformed_seed_file_yields_empty_catalog(fake_redis, tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    store = CatalogStore(fake_redis, path)

    assert store.read_catalog() == []


def test_seed_write_failure_yields_empty_catalog(store, fake_redis) -> None:
    fake_redis.fail_set = True

    assert store.read_catalog() == []


def test_unreachable_store_raises_unavailable(store, fake_redis) -> None:
    fake_redis.fail_get = True

    with pytest.raises(StoreUnavailable):
        store.read_catalog()


def test_non_array_catalog_raises_unavailable(store, fake_redis) -> None:
    fake_redis.data["products"] = json.dumps({"id": "1"})

    with pytest.raises(StoreUnavailable):
        store.read_catalog()


def test_unconfigured_store_raises_unavailable(seed_path: Path) -> None:
    store = CatalogStore.from_settings(Settings(redis_url=None, seed_path=seed_path))

    assert not store.ready
    with pytest.raises(StoreUnavailable, match="Database connection not available"):
        store.read_catalog()
    with pytest.raises(StoreUnavailable):
        store.write_catalog([])


def test_write_failure_raises_store_write_failed(store, fake_redis) -> None:
    fake_redis.fail_set = True

    with pytest.raises(StoreWriteFailed, match="Failed to save product data."):
        store.write_catalog([LAMP])


def test_mutate_returns_previous_and_updated(store, fake_redis) -> None:
    previous, updated = store.mutate(lambda rows: rows + [LAMP])

    assert previous == SEED_PRODUCTS
    assert updated == SEED_PRODUCTS + [LAMP]
    assert fake_redis.stored() == SEED_PRODUCTS + [LAMP]


def test_seed_keeps_existing_catalog_unless_forced(store, fake_redis) -> None:
    store.write_catalog([LAMP])

    assert store.seed() == [LAMP]

    reseeded = store.seed(force=True)
    assert [row["id"] for row in reseeded] == ["100", "200", "300"]
    assert fake_redis.stored() == SEED_PRODUCTS
