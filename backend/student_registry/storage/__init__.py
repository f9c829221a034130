"""
Asset storage for student photos.
"""

from .base import AssetStore, AssetStoreConfig
from .minio_adapter import MinIOAssetStore
from .factory import create_asset_store, get_asset_store
from .refs import derive_asset_ref, resolve_asset_ref

__all__ = [
    "AssetStore",
    "AssetStoreConfig",
    "MinIOAssetStore",
    "create_asset_store",
    "get_asset_store",
    "derive_asset_ref",
    "resolve_asset_ref",
]
