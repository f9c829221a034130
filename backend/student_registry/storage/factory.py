"""
Asset Store Factory

Creates the configured asset store adapter and hands out the process-wide
instance used by the API.
"""

import os
from functools import lru_cache
from typing import Optional

from .base import AssetStore, AssetStoreConfig
from .minio_adapter import MinIOAssetStore

ASSET_STORE_BACKEND = os.getenv("ASSET_STORE_BACKEND", "minio")


def create_asset_store(backend: str = ASSET_STORE_BACKEND,
                       config: Optional[AssetStoreConfig] = None) -> AssetStore:
    """
    Create an asset store instance based on backend name

    Args:
        backend: Storage backend ("minio")
        config: Optional custom configuration, read from the environment otherwise

    Returns:
        AssetStore implementation
    """
    if config is None:
        config = AssetStoreConfig()

    if backend.lower() == "minio":
        return MinIOAssetStore(config)
    raise ValueError(f"Unsupported asset store backend: {backend}")


@lru_cache
def get_asset_store() -> AssetStore:
    """FastAPI dependency returning the shared asset store."""
    return create_asset_store()
