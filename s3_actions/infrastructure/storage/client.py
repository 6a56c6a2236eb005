"""
S3-compatible object storage client.

Works against AWS S3 and anything speaking the same API (MinIO, R2,
Wasabi, ...). A client is built per action call from a StorageConfig and
thrown away afterwards; there is no pooling.

boto3 is synchronous, so every backend call runs in a worker thread via
asyncio.to_thread. Backend exceptions are not caught here: a ClientError
from botocore reaches the caller exactly as boto3 raised it.
"""

import asyncio
import logging
from typing import Any, BinaryIO, Optional, Protocol

from ...core.storage.models import AddressingMode, StorageConfig

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """
    Protocol for the storage operations the actions need.

    Tests can substitute a fake and the actions never see boto3 types
    in their signatures.
    """

    async def presign_put(
        self,
        bucket: str,
        key: str,
        content_type: str,
        expires_in: int,
        acl: Optional[str] = None,
    ) -> str:
        """Signed URL authorising a PUT of one object."""
        ...

    async def presign_get(self, bucket: str, key: str, expires_in: int) -> str:
        """Signed URL authorising a GET of one object."""
        ...

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        content_type: str,
        acl: Optional[str] = None,
        content_disposition: Optional[str] = None,
    ) -> dict[str, Any]:
        """Write an object and return the backend response."""
        ...

    async def list_objects(self, bucket: str, prefix: str = "") -> dict[str, Any]:
        """Return the raw listing response."""
        ...

    async def copy_object(
        self,
        copy_source: str,
        bucket: str,
        key: str,
    ) -> dict[str, Any]:
        """Copy `copy_source` ("bucket/key") onto bucket/key."""
        ...

    async def delete_object(self, bucket: str, key: str) -> dict[str, Any]:
        """Delete one object. No existence check."""
        ...


class S3ObjectStore:
    """
    boto3-backed ObjectStore.

    Signature v4 is always used; the addressing style follows the
    config so that presigned URLs match the URLs we hand out.
    """

    def __init__(self, config: StorageConfig) -> None:
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for S3 storage. Install with: pip install boto3"
            )

        self._config = config

        boto_config = Config(
            signature_version="s3v4",
            s3={"addressing_style": _boto_addressing_style(config)},
        )

        self._s3_client = boto3.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint,
            aws_access_key_id=config.credentials.access_key_id,
            aws_secret_access_key=config.credentials.secret_access_key,
            config=boto_config,
        )

        logger.debug(
            "Initialized S3 client",
            extra={
                "region": config.region,
                "endpoint": config.endpoint,
                "provider": config.provider,
                "force_path_style": config.force_path_style,
            }
        )

    @property
    def config(self) -> StorageConfig:
        return self._config

    async def presign_put(
        self,
        bucket: str,
        key: str,
        content_type: str,
        expires_in: int,
        acl: Optional[str] = None,
    ) -> str:
        """
        Presign a PutObject request.

        ContentType (and ACL when given) are part of the signature, so
        the uploader must send matching headers.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "ContentType": content_type,
        }
        if acl:
            params["ACL"] = acl

        return await asyncio.to_thread(
            self._s3_client.generate_presigned_url,
            "put_object",
            Params=params,
            ExpiresIn=expires_in,
        )

    async def presign_get(self, bucket: str, key: str, expires_in: int) -> str:
        return await asyncio.to_thread(
            self._s3_client.generate_presigned_url,
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        content_type: str,
        acl: Optional[str] = None,
        content_disposition: Optional[str] = None,
    ) -> dict[str, Any]:
        """Upload `body` in a single request; the stream is read to the end."""
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        # boto3 rejects None for optional members
        if acl:
            params["ACL"] = acl
        if content_disposition:
            params["ContentDisposition"] = content_disposition

        response = await asyncio.to_thread(self._s3_client.put_object, **params)

        logger.info(
            "Uploaded object",
            extra={"bucket": bucket, "key": key, "content_type": content_type},
        )

        return response

    async def list_objects(self, bucket: str, prefix: str = "") -> dict[str, Any]:
        return await asyncio.to_thread(
            self._s3_client.list_objects_v2,
            Bucket=bucket,
            Prefix=prefix,
        )

    async def copy_object(
        self,
        copy_source: str,
        bucket: str,
        key: str,
    ) -> dict[str, Any]:
        response = await asyncio.to_thread(
            self._s3_client.copy_object,
            Bucket=bucket,
            Key=key,
            CopySource=copy_source,
        )

        logger.info(
            "Copied object",
            extra={"copy_source": copy_source, "bucket": bucket, "key": key},
        )

        return response

    async def delete_object(self, bucket: str, key: str) -> dict[str, Any]:
        response = await asyncio.to_thread(
            self._s3_client.delete_object,
            Bucket=bucket,
            Key=key,
        )

        logger.info("Deleted object", extra={"bucket": bucket, "key": key})

        return response


def _boto_addressing_style(config: StorageConfig) -> str:
    # only force_path_style changes what the SDK does; a custom provider
    # affects the returned URL but leaves the SDK on its default
    if config.force_path_style:
        return AddressingMode.PATH_STYLE.value
    return "auto"


def create_object_store(config: StorageConfig) -> ObjectStore:
    """
    Build a fresh ObjectStore for one action call.

    Kept as a function so tests and the action layer share one seam for
    swapping the backend.
    """
    return S3ObjectStore(config)
