"""Object storage for video uploads.

The API only needs presigned PUT URLs. ``S3Storage`` signs them for AWS S3 or
any S3-compatible endpoint (MinIO, Garage); other providers plug in by
implementing ``ObjectStorage``.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from fitcore.config import config
from fitcore.core.errors import StorageError
from fitcore.core.logging import logger


class ObjectStorage(ABC):
    """Issues presigned URLs for direct client uploads."""

    @abstractmethod
    async def presign_put(
        self, key: str, content_type: str, size_bytes: int, ttl: timedelta
    ) -> str:
        """Return a URL the client can PUT the object to until ``ttl`` elapses."""


class S3Storage(ObjectStorage):
    """SigV4 presigner for one bucket.

    Path-style addressing is used so the same code works against MinIO.
    Missing keys fall back to the default AWS credential chain.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        self.bucket = bucket
        session = boto3.session.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )
        self._client = session.client(
            "s3",
            endpoint_url=endpoint_url,
            config=BotoConfig(
                region_name=region,
                s3={"addressing_style": "path"},
                signature_version="s3v4",
            ),
        )

    def _presign(self, key: str, content_type: str, size_bytes: int, ttl: timedelta) -> str:
        params = {"Bucket": self.bucket, "Key": key, "ContentType": content_type}
        # signed, so the client must upload exactly the declared size
        if size_bytes > 0:
            params["ContentLength"] = size_bytes

        try:
            return self._client.generate_presigned_url(
                ClientMethod="put_object",
                Params=params,
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("s3_presign_failed", bucket=self.bucket, key=key, error=str(e))
            raise StorageError(f"failed to presign PUT for {key}") from e

    async def presign_put(
        self, key: str, content_type: str, size_bytes: int, ttl: timedelta
    ) -> str:
        """Presign a PUT of ``key`` with the given content type and size."""
        return await asyncio.to_thread(self._presign, key, content_type, size_bytes, ttl)


def build_object_storage() -> Optional[ObjectStorage]:
    """Build S3 storage from configuration, or None when S3_BUCKET is unset."""
    bucket = config.s3_bucket()
    if not bucket:
        logger.warning("object_storage_unconfigured", reason="S3_BUCKET not set")
        return None

    logger.info("object_storage_configured", bucket=bucket, endpoint=config.s3_endpoint_url())
    return S3Storage(
        bucket=bucket,
        region=config.s3_region(),
        endpoint_url=config.s3_endpoint_url(),
        access_key_id=config.s3_access_key_id(),
        secret_access_key=config.s3_secret_access_key(),
    )
