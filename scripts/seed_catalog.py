"""Seed the configured key-value store with the bundled product catalog."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from product_catalog.config import Settings
from product_catalog.service.catalog_store import CatalogStore
from product_catalog.service.errors import CatalogError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--seed-path",
        type=Path,
        default=None,
        help="JSON array of products to load (defaults to CATALOG_SEED_PATH).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the catalog even if the store already holds one.",
    )
    return parser.parse_args()


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    settings = Settings.from_env()
    if args.seed_path is not None:
        settings.seed_path = args.seed_path

    store = CatalogStore.from_settings(settings)
    try:
        products = store.seed(force=args.force)
    except CatalogError as exc:
        print(f"Seeding failed: {exc}", file=sys.stderr)
        return 1
    print(f"Catalog under {settings.catalog_key!r} holds {len(products)} products.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
