"""
Test configuration and fixtures.
Uses an in-memory object store in place of S3.
"""
import os

# Set test environment before any imports
os.environ["S3_REGION"] = "us-east-1"
os.environ["S3_ENDPOINT"] = "https://s3.test.local"
os.environ["S3_BUCKET_NAME"] = "files"
os.environ["S3_ACCESS_KEY_ID"] = "test-access-key"
os.environ["S3_SECRET_ACCESS_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

import pytest
from typing import AsyncGenerator, Dict, List, Optional, Set, Tuple
from urllib.parse import urlsplit

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from filemanager.client.api import FileManagerClient
from filemanager.client.notifications import Notifier
from filemanager.storage.base import ObjectStore, StorageError


class FakeObjectStore(ObjectStore):
    """In-memory object store. Operations listed in fail_on raise StorageError."""

    def __init__(self, bucket: str = "files", endpoint_url: str = "https://s3.test.local"):
        self.bucket = bucket
        self.endpoint_url = endpoint_url
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.fail_on: Set[str] = set()
        self.sign_calls: List[Tuple[str, int]] = []

    def _maybe_fail(self, operation: str, key: Optional[str] = None) -> None:
        if operation in self.fail_on:
            raise StorageError(operation, key=key, reason="connection refused")

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        self._maybe_fail("put", key)
        self.objects[key] = (data, content_type)

    def list_objects(self) -> List[str]:
        self._maybe_fail("list")
        return list(self.objects)

    def delete_object(self, key: str) -> None:
        self._maybe_fail("delete", key)
        self.objects.pop(key, None)

    def generate_presigned_url(self, key: str, expires_in: int) -> str:
        self._maybe_fail("sign", key)
        self.sign_calls.append((key, expires_in))
        return f"{self.object_url(key)}?X-Amz-Expires={expires_in}&X-Amz-Signature=fake"

    def object_url(self, key: str) -> str:
        return f"{self.endpoint_url}/{self.bucket}/{key}"

    def check_connection(self) -> None:
        self._maybe_fail("head_bucket")

    def fetch(self, url: str) -> bytes:
        """Resolve a signed or unsigned URL back to the stored bytes."""
        path = urlsplit(url).path
        prefix = f"/{self.bucket}/"
        assert path.startswith(prefix)
        return self.objects[path[len(prefix):]][0]


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


def get_test_app(store: ObjectStore) -> FastAPI:
    """Return the FastAPI app with the object store overridden."""
    from filemanager.main import app
    from filemanager.dependencies import get_object_store

    app.dependency_overrides[get_object_store] = lambda: store
    return app


@pytest.fixture(scope="function")
async def client(store: FakeObjectStore) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(store)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def api(client: AsyncClient) -> FileManagerClient:
    """File manager client talking to the app in-process."""
    return FileManagerClient(http_client=client, chunk_size=1024)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(echo=False)
