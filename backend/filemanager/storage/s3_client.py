"""
S3-compatible storage client.

Uses boto3 with the S3 API. Works with AWS S3, MinIO, Cloudflare R2 and any
other provider that speaks the same protocol.

The bucket stays private: files are handed out through presigned GET URLs
that expire after a fixed window. Every failure coming out of the SDK is
raised as StorageError.
"""
import logging
from typing import List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from filemanager.config import Settings
from filemanager.storage.base import ObjectStore, StorageError

logger = logging.getLogger(__name__)


class S3ObjectStore(ObjectStore):
    """
    boto3-backed object store bound to a single bucket.

    Every failing call is logged and re-raised as StorageError.
    """

    def __init__(
        self,
        bucket: str,
        endpoint_url: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        addressing_style: str = "path",
        client=None
    ):
        """
        Initialize the store.

        Args:
            bucket: Bucket name
            endpoint_url: S3 endpoint (also used to build object URLs)
            region: Region name
            access_key_id: Access key ID
            secret_access_key: Secret access key
            addressing_style: 'path' or 'virtual'
            client: Pre-built boto3 S3 client (tests pass a stubbed one)
        """
        self.bucket = bucket
        self.endpoint_url = endpoint_url.rstrip("/")

        if client is None:
            # signature_version='s3v4' is required by most S3-compatible providers
            client = boto3.client(
                's3',
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
                config=Config(
                    signature_version='s3v4',
                    s3={'addressing_style': addressing_style}
                )
            )
        self._client = client
        logger.info(f"S3 client initialized for bucket: {bucket}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        """Build a store from application settings."""
        return cls(
            bucket=settings.s3_bucket_name,
            endpoint_url=settings.s3_endpoint,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            addressing_style=settings.s3_addressing_style
        )

    def _fail(self, operation: str, error: Exception, key: Optional[str] = None) -> StorageError:
        logger.error(f"S3 {operation} failed (bucket={self.bucket}, key={key}): {error}")
        return StorageError(operation, key=key, reason=str(error))

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type
            )
            logger.debug(f"Stored {key} ({len(data)} bytes)")
        except Exception as e:
            raise self._fail("put", e, key) from e

    def list_objects(self) -> List[str]:
        """
        List object keys with a single ListObjectsV2 call.

        Only the first page (at most 1000 keys) is returned; larger buckets
        are not paginated.
        """
        try:
            response = self._client.list_objects_v2(Bucket=self.bucket)
        except Exception as e:
            raise self._fail("list", e) from e

        # Contents is absent when the bucket is empty
        return [obj['Key'] for obj in response.get('Contents', [])]

    def delete_object(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
            logger.debug(f"Deleted object {key}")
        except ClientError as e:
            # If object doesn't exist, consider it a success (idempotent)
            if e.response['Error']['Code'] in ('404', 'NoSuchKey'):
                logger.debug(f"Object {key} not found (already deleted)")
                return
            raise self._fail("delete", e, key) from e
        except Exception as e:
            raise self._fail("delete", e, key) from e

    def generate_presigned_url(self, key: str, expires_in: int) -> str:
        try:
            url = self._client.generate_presigned_url(
                ClientMethod='get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': key,
                },
                ExpiresIn=expires_in
            )
        except Exception as e:
            raise self._fail("sign", e, key) from e

        logger.debug(f"Generated presigned read URL for {key} (expires in {expires_in}s)")
        return url

    def object_url(self, key: str) -> str:
        return f"{self.endpoint_url}/{self.bucket}/{key}"

    def check_connection(self) -> None:
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except Exception as e:
            raise self._fail("head_bucket", e) from e
