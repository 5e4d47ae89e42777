"""
Tests for the command-line client.
"""
import pytest

from filemanager.client import cli
from filemanager.client.api import FileManagerClient


async def run_cli(client, *argv) -> int:
    args = cli.build_parser().parse_args(list(argv))
    return await cli.run(args, api=FileManagerClient(http_client=client))


class TestParser:
    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("FILEMANAGER_URL", "http://files.internal:9000")

        args = cli.build_parser().parse_args(["list"])

        assert args.base_url == "http://files.internal:9000"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestCommands:
    """Tests for CLI commands against the in-process API."""

    @pytest.mark.asyncio
    async def test_upload(self, client, store, tmp_path, capsys):
        first = tmp_path / "notes.txt"
        first.write_text("hello")
        second = tmp_path / "photo.png"
        second.write_bytes(b"\x89PNG")

        code = await run_cli(client, "upload", str(first), str(second))

        assert code == 0
        assert sorted(key.rsplit("-", 1)[-1] for key in store.objects) == ["notes.txt", "photo.png"]
        content_types = {ct for _, ct in store.objects.values()}
        assert content_types == {"text/plain", "image/png"}
        out = capsys.readouterr()
        assert "Done" in out.out
        assert "All files uploaded successfully" in out.err

    @pytest.mark.asyncio
    async def test_upload_missing_path(self, client, store, tmp_path, capsys):
        code = await run_cli(client, "upload", str(tmp_path / "missing.txt"))

        assert code == 1
        assert store.objects == {}
        assert "Select files first" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_list(self, client, store, capsys):
        store.put_object("1700-abc-report.pdf", b"pdf", "application/pdf")

        code = await run_cli(client, "list")

        assert code == 0
        assert "1700-abc-report.pdf" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_with_yes(self, client, store):
        store.put_object("a.txt", b"a", "text/plain")

        code = await run_cli(client, "delete", "a.txt", "--yes")

        assert code == 0
        assert store.objects == {}

    @pytest.mark.asyncio
    async def test_delete_declined(self, client, store, monkeypatch):
        store.put_object("a.txt", b"a", "text/plain")
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        code = await run_cli(client, "delete", "a.txt")

        assert code == 1
        assert "a.txt" in store.objects

    @pytest.mark.asyncio
    async def test_delete_unknown_key(self, client, capsys):
        code = await run_cli(client, "delete", "ghost.txt", "--yes")

        assert code == 1
        assert "File not found: ghost.txt" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_url(self, client, store, capsys):
        store.put_object("a.txt", b"a", "text/plain")

        code = await run_cli(client, "url", "a.txt")

        assert code == 0
        out = capsys.readouterr().out.strip()
        assert out.startswith("https://s3.test.local/files/a.txt?")
        assert "X-Amz-Expires=3600" in out

    @pytest.mark.asyncio
    async def test_open(self, client, store, monkeypatch):
        store.put_object("a.txt", b"a", "text/plain")
        opened = []
        monkeypatch.setattr(cli, "FileListView", _view_with_opener(opened.append))

        code = await run_cli(client, "open", "a.txt")

        assert code == 0
        assert len(opened) == 1
        assert opened[0].startswith("https://s3.test.local/files/a.txt?")


def _view_with_opener(opener):
    from filemanager.client.view import FileListView

    def factory(api, notifier, **kwargs):
        kwargs.setdefault("opener", opener)
        return FileListView(api, notifier, **kwargs)

    return factory
