"""
MinIO Asset Store Adapter

Implements AssetStore on top of the MinIO client. Every call goes through a
urllib3 pool with a bounded timeout and no retries, so a slow or unreachable
server surfaces as AssetStoreError instead of blocking the request.
"""

import io
import uuid

import urllib3
from minio import Minio
from minio.error import MinioException

from student_registry.errors import AssetStoreError
from student_registry.logging_config import get_logger, log_with_context
from .base import AssetStore, AssetStoreConfig

logger = get_logger("storage")


def _build_http_client(timeout_seconds: float) -> urllib3.PoolManager:
    return urllib3.PoolManager(
        timeout=urllib3.Timeout(connect=timeout_seconds, read=timeout_seconds),
        retries=urllib3.Retry(total=0),
    )


class MinIOAssetStore(AssetStore):
    """
    MinIO implementation of AssetStore

    Objects are written as ``<folder>/<uuid hex>`` with no file extension,
    so the URL-derivation rule in refs.py maps a URL back to the same key.
    """

    def __init__(self, config: AssetStoreConfig, client: Minio = None):
        super().__init__(config)
        self.client = client or Minio(
            endpoint=config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=config.secure,
            region=config.region,
            http_client=_build_http_client(config.timeout_seconds),
        )

    def initialize(self) -> bool:
        """Ensure the photo bucket exists, create it if it doesn't"""
        try:
            if not self.client.bucket_exists(self.config.bucket):
                self.client.make_bucket(self.config.bucket)
                log_with_context(logger, "INFO", "Created bucket {}".format(self.config.bucket))
            return True
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            log_with_context(logger, "ERROR", "Bucket initialization failed: {}".format(e),
                             extra_data={"bucket": self.config.bucket})
            return False

    def upload(self, data: bytes, content_type: str) -> str:
        ref = "{}/{}".format(self.config.folder, uuid.uuid4().hex)
        log_with_context(logger, "DEBUG", "Uploading object {}".format(ref),
                         context={"asset_ref": ref},
                         extra_data={"size": len(data), "content_type": content_type})
        try:
            self.client.put_object(
                bucket_name=self.config.bucket,
                object_name=ref,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            log_with_context(logger, "ERROR", "Upload failed: {}".format(e),
                             context={"asset_ref": ref})
            raise AssetStoreError(str(e)) from e

        log_with_context(logger, "INFO", "Uploaded object {}".format(ref),
                         context={"asset_ref": ref}, extra_data={"size": len(data)})
        return ref

    def delete(self, ref: str) -> None:
        log_with_context(logger, "DEBUG", "Deleting object {}".format(ref),
                         context={"asset_ref": ref})
        try:
            self.client.remove_object(
                bucket_name=self.config.bucket,
                object_name=ref,
            )
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            raise AssetStoreError(str(e)) from e

        log_with_context(logger, "INFO", "Deleted object {}".format(ref),
                         context={"asset_ref": ref})
