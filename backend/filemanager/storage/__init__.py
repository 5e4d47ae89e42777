"""
Storage module for S3-compatible object storage.

The API layer depends on the ObjectStore interface; S3ObjectStore is the
boto3 implementation built once at startup.
"""
from filemanager.storage.base import ObjectStore, StorageError
from filemanager.storage.s3_client import S3ObjectStore

__all__ = ["ObjectStore", "StorageError", "S3ObjectStore"]
