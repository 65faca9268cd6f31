"""Runtime configuration for the product catalog service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PERMISSIVE_ENV = "development"


def _first_set(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


@dataclass
class Settings:
    """Store endpoint, seed location and access-gate secrets."""

    redis_url: Optional[str] = None
    redis_token: Optional[str] = None
    catalog_key: str = "products"
    seed_path: Path = Path("data/products.json")
    app_env: str = "production"
    api_key: Optional[str] = None

    @property
    def permissive(self) -> bool:
        return self.app_env == PERMISSIVE_ENV

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            redis_url=_first_set(env, "REDIS_URL", "KV_URL"),
            redis_token=_first_set(env, "REDIS_TOKEN", "KV_REST_API_TOKEN"),
            catalog_key=env.get("CATALOG_KEY") or "products",
            seed_path=Path(env.get("CATALOG_SEED_PATH") or "data/products.json"),
            app_env=env.get("APP_ENV") or "production",
            api_key=env.get("API_KEY") or None,
        )
