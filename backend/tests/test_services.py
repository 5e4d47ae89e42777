"""
Tests for service layer business logic.
"""
import re
import threading
import time

import pytest

from filemanager.services.file_service import FileService, SIGNED_URL_EXPIRATION
from filemanager.storage.base import StorageError


class TestObjectKeys:
    """Tests for object key generation."""

    def test_key_format(self):
        """Test key is millis, 13-char base-36 suffix, then the file name."""
        key = FileService.generate_object_key("report.final.pdf", clock=lambda: 1700000000.123)

        assert re.fullmatch(r"1700000000123-[a-z0-9]{13}-report\.final\.pdf", key)

    def test_keys_unique_for_same_name_and_time(self):
        """Test the random suffix separates uploads in the same millisecond."""
        keys = {
            FileService.generate_object_key("same.txt", clock=lambda: 1700000000.0)
            for _ in range(200)
        }

        assert len(keys) == 200


class TestFileService:
    """Tests for FileService."""

    @pytest.mark.asyncio
    async def test_upload_returns_unsigned_url(self, store):
        url = await FileService.upload_file(store, "a.txt", b"abc", "text/plain")

        (key,) = store.objects
        assert url == store.object_url(key)
        assert "Signature" not in url

    @pytest.mark.asyncio
    async def test_upload_default_content_type(self, store):
        """Test parts without a content type are stored as octet-stream."""
        await FileService.upload_file(store, "blob", b"\x00\x01", None)

        (_, content_type), = store.objects.values()
        assert content_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_upload_failure_propagates(self, store):
        store.fail_on.add("put")

        with pytest.raises(StorageError):
            await FileService.upload_file(store, "a.txt", b"abc", "text/plain")

    @pytest.mark.asyncio
    async def test_list_empty(self, store):
        assert await FileService.list_files(store) == []

    @pytest.mark.asyncio
    async def test_list_signs_concurrently_and_keeps_order(self, store):
        """Test signatures run in parallel threads but results keep key order."""
        for name in ["c.txt", "a.txt", "b.txt"]:
            store.put_object(name, name.encode(), "text/plain")

        delays = {"c.txt": 0.2, "a.txt": 0.0, "b.txt": 0.1}
        active = []
        peak = [0]
        lock = threading.Lock()
        sign = store.generate_presigned_url

        def slow_sign(key, expires_in):
            with lock:
                active.append(key)
                peak[0] = max(peak[0], len(active))
            time.sleep(delays[key])
            with lock:
                active.remove(key)
            return sign(key, expires_in)

        store.generate_presigned_url = slow_sign

        files = await FileService.list_files(store)

        assert [f.key for f in files] == ["c.txt", "a.txt", "b.txt"]
        assert all(f.url.startswith(store.object_url(f.key)) for f in files)
        assert peak[0] > 1
        assert {expires for _, expires in store.sign_calls} == {SIGNED_URL_EXPIRATION}

    @pytest.mark.asyncio
    async def test_delete_missing_key(self, store):
        await FileService.delete_file(store, "ghost.txt")
        assert store.objects == {}
