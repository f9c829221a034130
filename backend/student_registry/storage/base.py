"""
Asset Store Abstract Base Classes

Defines the interface object storage adapters implement so the record
lifecycle can upload, address and reclaim student photos without knowing
which provider holds them.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AssetStoreConfig:
    """Configuration for the photo object store"""
    endpoint: str = field(default_factory=lambda: os.getenv("MINIO_ENDPOINT", "localhost:9000"))
    access_key: str = field(default_factory=lambda: os.getenv("MINIO_ACCESS_KEY", "minioadmin"))
    secret_key: str = field(default_factory=lambda: os.getenv("MINIO_SECRET_KEY", "minioadmin"))
    secure: bool = field(default_factory=lambda: os.getenv("MINIO_SECURE", "false").lower() == "true")
    region: Optional[str] = field(default_factory=lambda: os.getenv("MINIO_REGION") or None)

    bucket: str = field(default_factory=lambda: os.getenv("ASSET_BUCKET", "student-assets"))
    # Fixed logical namespace every key lives under
    folder: str = field(default_factory=lambda: os.getenv("ASSET_FOLDER", "students"))
    public_base_url: str = field(default_factory=lambda: os.getenv("ASSET_PUBLIC_BASE_URL", "http://localhost:9000"))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("ASSET_TIMEOUT_SECONDS", "10")))


class AssetStore(ABC):
    """
    Abstract interface for photo storage operations

    An AssetRef is the object key (``<folder>/<name>``). It is enough to
    rebuild the public URL and to request deletion.
    """

    def __init__(self, config: AssetStoreConfig):
        self.config = config

    @abstractmethod
    def upload(self, data: bytes, content_type: str) -> str:
        """
        Store bytes as a new object

        Args:
            data: Image content
            content_type: MIME content type

        Returns:
            AssetRef of the stored object

        Raises:
            AssetStoreError: the object could not be stored
        """

    @abstractmethod
    def delete(self, ref: str) -> None:
        """
        Delete an object

        Args:
            ref: AssetRef returned by upload

        Raises:
            AssetStoreError: the delete request failed
        """

    def url_for(self, ref: str) -> str:
        """Public URL of an object"""
        return "{}/{}/{}".format(self.config.public_base_url.rstrip("/"), self.config.bucket, ref)

    def initialize(self) -> bool:
        """Prepare the store (create buckets, etc.)"""
        return True
