from functools import lru_cache
from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger
from starlette.concurrency import run_in_threadpool

from community_registry.core.config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
)
from community_registry.core.errors import (
    BucketNotFoundError,
    ObjectNotFoundError,
    StoragePermissionError,
    UpstreamFailure,
)

MISSING_CODES = {"404", "NoSuchBucket", "NoSuchKey", "NotFound"}
DENIED_CODES = {"403", "AccessDenied", "Forbidden"}

# SigV4 presigned URLs carry a relative X-Amz-Expires instead of an epoch
S3_CLIENT_CONFIG = BotoConfig(signature_version="s3v4")


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class ObjectStorage:
    """
    Thin async facade over an S3-compatible client.

    boto3 is blocking, so every call is pushed onto the threadpool.
    """

    def __init__(self, client):
        self.client = client

    async def bucket_exists(self, bucket: str) -> bool:
        try:
            await run_in_threadpool(self.client.head_bucket, Bucket=bucket)
        except ClientError as e:
            code = _error_code(e)
            if code in MISSING_CODES:
                return False
            if code in DENIED_CODES:
                raise StoragePermissionError(bucket)
            raise UpstreamFailure(f"Storage error: {e}")
        return True

    async def object_exists(self, bucket: str, key: str) -> bool:
        try:
            await run_in_threadpool(self.client.head_object, Bucket=bucket, Key=key)
        except ClientError as e:
            code = _error_code(e)
            if code in MISSING_CODES:
                return False
            if code in DENIED_CODES:
                raise StoragePermissionError(bucket)
            raise UpstreamFailure(f"Storage error: {e}")
        return True

    async def signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        """
        Returns a read-only URL for ``bucket/key`` valid for ``expires_in`` seconds.
        Missing bucket and missing object are reported separately.
        """
        if not await self.bucket_exists(bucket):
            raise BucketNotFoundError(bucket)
        if not await self.object_exists(bucket, key):
            raise ObjectNotFoundError(bucket, key)

        try:
            return await run_in_threadpool(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except ClientError as e:
            if _error_code(e) in DENIED_CODES:
                raise StoragePermissionError(bucket)
            raise UpstreamFailure(f"Failed to generate signed URL: {e}")
        except BotoCoreError as e:
            raise UpstreamFailure(f"Failed to generate signed URL: {e}")

    async def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        if not await self.bucket_exists(bucket):
            raise BucketNotFoundError(bucket)

        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except ClientError as e:
            if _error_code(e) in DENIED_CODES:
                raise StoragePermissionError(bucket)
            raise UpstreamFailure(f"Failed to upload photo: {e}")
        logger.info(f"Uploaded object {bucket}/{key} ({len(data)} bytes)")
        return key


def build_s3_client():
    session = boto3.session.Session()
    return session.client(
        "s3",
        region_name=STORAGE_REGION or None,
        endpoint_url=STORAGE_ENDPOINT_URL or None,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID or None,
        aws_secret_access_key=str(STORAGE_SECRET_ACCESS_KEY) or None,
        config=S3_CLIENT_CONFIG,
    )


@lru_cache
def get_storage() -> ObjectStorage:
    """
    FastAPI dependency returning the process-wide storage facade.
    Tests replace it through ``app.dependency_overrides``.
    """
    return ObjectStorage(build_s3_client())
