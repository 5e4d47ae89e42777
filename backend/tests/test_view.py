"""
Tests for the file list view and display helpers.
"""
import httpx
import pytest

from filemanager.client.api import FileManagerClient
from filemanager.client.formatting import (
    format_file_size,
    format_upload_speed,
    get_file_extension,
    get_file_icon_color,
    get_file_name,
)
from filemanager.client.notifications import NotificationLevel
from filemanager.client.view import EMPTY_LIST_MESSAGE, FileEntry, FileListView
from filemanager.schemas.files import StoredObject


class TestFormatting:
    """Tests for display helpers."""

    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1.0 MB"),
        (10 * 1024 * 1024, "10.0 MB"),
    ])
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    @pytest.mark.parametrize("speed,expected", [
        (512, "512.0 B/s"),
        (2048, "2.0 KB/s"),
        (3.5 * 1024 * 1024, "3.5 MB/s"),
    ])
    def test_format_upload_speed(self, speed, expected):
        assert format_upload_speed(speed) == expected

    def test_extension(self):
        assert get_file_extension("Report.Final.PDF") == "pdf"
        assert get_file_extension("Makefile") == ""

    def test_file_name_is_last_segment(self):
        assert get_file_name("a/b/c.txt") == "c.txt"
        assert get_file_name("c.txt") == "c.txt"
        assert get_file_name("folder/") == "folder/"

    def test_icon_colors(self):
        assert get_file_icon_color("pdf") == "red"
        assert get_file_icon_color("docx") == "blue"
        assert get_file_icon_color("xlsx") == "green"
        assert get_file_icon_color("pptx") == "orange"
        assert get_file_icon_color("png") == "purple"
        assert get_file_icon_color("rar") == "yellow"
        assert get_file_icon_color("txt") == "gray"
        assert get_file_icon_color("exe") == "blue"
        assert get_file_icon_color("") == "blue"


class TestFileEntry:
    def test_from_stored(self):
        entry = FileEntry.from_stored(StoredObject(key="docs/1700-abc-Budget.XLSX", url="https://signed"))

        assert entry.name == "1700-abc-Budget.XLSX"
        assert entry.extension == "xlsx"
        assert entry.color == "green"
        assert entry.url == "https://signed"


class TestFileListView:
    """Tests for FileListView actions."""

    @pytest.mark.asyncio
    async def test_refresh_and_render(self, api, store, notifier):
        store.put_object("1700-abc-report.pdf", b"pdf", "application/pdf")
        store.put_object("1700-def-photo.png", b"png", "image/png")
        view = FileListView(api, notifier)

        assert await view.refresh() is True

        assert [e.name for e in view.entries] == ["1700-abc-report.pdf", "1700-def-photo.png"]
        rendered = view.render()
        assert "1700-abc-report.pdf" in rendered
        assert "PDF|red" in rendered
        assert "PNG|purple" in rendered

    @pytest.mark.asyncio
    async def test_render_empty(self, api, notifier):
        view = FileListView(api, notifier)
        await view.refresh()

        assert view.render() == EMPTY_LIST_MESSAGE

    @pytest.mark.asyncio
    async def test_refresh_failure_keeps_entries(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        view = FileListView(api, notifier)
        await view.refresh()

        store.fail_on.add("list")
        assert await view.refresh() is False

        assert [e.key for e in view.entries] == ["a.txt"]
        assert notifier.messages(NotificationLevel.ERROR) == ["Failed to load files"]

    @pytest.mark.asyncio
    async def test_copy_url(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        copied = []
        view = FileListView(api, notifier, clipboard=copied.append)
        await view.refresh()

        view.copy_url(view.entries[0])

        assert copied == [view.entries[0].url]
        assert notifier.messages(NotificationLevel.SUCCESS) == ["URL copied to clipboard"]

    @pytest.mark.asyncio
    async def test_open_url(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        opened = []
        view = FileListView(api, notifier, opener=opened.append)
        await view.refresh()

        view.open_url(view.entries[0])

        assert opened == [view.entries[0].url]

    @pytest.mark.asyncio
    async def test_delete_confirmed(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        store.put_object("b.txt", b"b", "text/plain")
        prompts = []
        view = FileListView(api, notifier, confirm=lambda p: prompts.append(p) or True)
        await view.refresh()

        assert await view.delete(view.find("a.txt")) is True

        assert len(prompts) == 1
        assert [e.key for e in view.entries] == ["b.txt"]
        assert "a.txt" not in store.objects
        assert notifier.messages(NotificationLevel.SUCCESS) == ["File deleted successfully"]

    @pytest.mark.asyncio
    async def test_delete_declined(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        view = FileListView(api, notifier, confirm=lambda p: False)
        await view.refresh()

        assert await view.delete(view.entries[0]) is False

        assert "a.txt" in store.objects

    @pytest.mark.asyncio
    async def test_delete_failure(self, api, store, notifier):
        store.put_object("a.txt", b"a", "text/plain")
        view = FileListView(api, notifier, confirm=lambda p: True)
        await view.refresh()
        store.fail_on.add("delete")

        assert await view.delete(view.entries[0]) is False

        assert notifier.messages(NotificationLevel.ERROR) == ["Failed to delete file"]
        assert [e.key for e in view.entries] == ["a.txt"]

    @pytest.mark.asyncio
    async def test_transport_failure(self, notifier):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
        async with FileManagerClient(http_client=http) as api:
            view = FileListView(api, notifier)
            assert await view.refresh() is False
        await http.aclose()

        assert notifier.messages(NotificationLevel.ERROR) == ["Failed to load files"]
