"""
File service.

Business logic behind the upload, list and delete endpoints. Object store
calls are blocking (boto3), so they run in the worker thread pool.

Flow:
1. Upload: generate a collision-resistant key, store the bytes, return the
   unsigned object URL
2. List: enumerate the bucket, sign one GET URL per key concurrently
3. Delete: unconditional, idempotent delete by key
"""
import asyncio
import logging
import secrets
import string
import time
from typing import Callable, List, Optional

from starlette.concurrency import run_in_threadpool

from filemanager.schemas.files import StoredObject
from filemanager.storage.base import ObjectStore, StorageError
from filemanager.utils.logging import (
    log_file_uploaded,
    log_files_listed,
    log_file_deleted,
    log_storage_failure,
)
from filemanager.utils.metrics import (
    storage_operations_total,
    storage_operation_duration_seconds,
    uploaded_bytes_total,
)

logger = logging.getLogger(__name__)

# Signed download links are valid for one hour
SIGNED_URL_EXPIRATION = 3600

KEY_SUFFIX_LENGTH = 13
KEY_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileService:
    """
    Service for object store operations.

    Responsibilities:
    - Generate unique object keys
    - Store, enumerate and delete objects
    - Sign temporary download URLs
    - Record storage metrics and structured log events
    """

    @staticmethod
    def generate_object_key(filename: str, clock: Callable[[], float] = time.time) -> str:
        """
        Generate a unique object key for an upload.

        Pattern: {unix_millis}-{random_suffix}-{filename}

        The timestamp plus a random base-36 suffix makes collisions between
        uploads of identically named files negligible without a lookup.

        Args:
            filename: Original file name, kept at the end of the key
            clock: Time source in seconds

        Returns:
            Object key string
        """
        millis = int(clock() * 1000)
        suffix = ''.join(secrets.choice(KEY_SUFFIX_ALPHABET) for _ in range(KEY_SUFFIX_LENGTH))
        return f"{millis}-{suffix}-{filename}"

    @staticmethod
    async def upload_file(
        store: ObjectStore,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None
    ) -> str:
        """
        Store an uploaded file.

        Args:
            store: Object store
            filename: Original file name
            data: File contents
            content_type: MIME type of the file

        Returns:
            Unsigned object URL

        Raises:
            StorageError: If the store rejects the upload
        """
        content_type = content_type or DEFAULT_CONTENT_TYPE
        object_key = FileService.generate_object_key(filename)

        start_time = time.time()
        try:
            await run_in_threadpool(store.put_object, object_key, data, content_type)
        except StorageError as e:
            storage_operations_total.labels(operation="upload", status="error").inc()
            log_storage_failure(logger, operation="upload", error=str(e), key=object_key)
            raise

        duration = time.time() - start_time
        storage_operations_total.labels(operation="upload", status="success").inc()
        storage_operation_duration_seconds.labels(operation="upload").observe(duration)
        uploaded_bytes_total.inc(len(data))
        log_file_uploaded(
            logger,
            key=object_key,
            size_bytes=len(data),
            content_type=content_type,
            duration_ms=duration * 1000
        )

        return store.object_url(object_key)

    @staticmethod
    async def list_files(store: ObjectStore) -> List[StoredObject]:
        """
        List every object in the bucket with a signed download URL.

        Signing runs concurrently; the result keeps the enumeration order.
        A single signing failure fails the whole listing.

        Args:
            store: Object store

        Returns:
            StoredObject list (empty if the bucket is empty)

        Raises:
            StorageError: If enumeration or any signature fails
        """
        start_time = time.time()
        try:
            keys = await run_in_threadpool(store.list_objects)
            urls = await asyncio.gather(*(
                run_in_threadpool(store.generate_presigned_url, key, SIGNED_URL_EXPIRATION)
                for key in keys
            ))
        except StorageError as e:
            storage_operations_total.labels(operation="list", status="error").inc()
            log_storage_failure(logger, operation="list", error=str(e), key=e.key)
            raise

        duration = time.time() - start_time
        storage_operations_total.labels(operation="list", status="success").inc()
        storage_operation_duration_seconds.labels(operation="list").observe(duration)
        log_files_listed(logger, count=len(keys), duration_ms=duration * 1000)

        return [StoredObject(key=key, url=url) for key, url in zip(keys, urls)]

    @staticmethod
    async def delete_file(store: ObjectStore, key: str) -> None:
        """
        Delete an object by key.

        Succeeds for keys that do not exist.

        Raises:
            StorageError: If the store rejects the delete
        """
        start_time = time.time()
        try:
            await run_in_threadpool(store.delete_object, key)
        except StorageError as e:
            storage_operations_total.labels(operation="delete", status="error").inc()
            log_storage_failure(logger, operation="delete", error=str(e), key=key)
            raise

        duration = time.time() - start_time
        storage_operations_total.labels(operation="delete", status="success").inc()
        storage_operation_duration_seconds.labels(operation="delete").observe(duration)
        log_file_deleted(logger, key=key, duration_ms=duration * 1000)
