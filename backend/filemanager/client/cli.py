#!/usr/bin/env python3
"""
Command-line client for the file manager API.

Usage:
    filemanager upload report.pdf photo.jpg
    filemanager list
    filemanager delete 1718000000000-k3j9x0a8b2c1d-report.pdf
    filemanager delete 1718000000000-k3j9x0a8b2c1d-report.pdf --yes
    filemanager url 1718000000000-k3j9x0a8b2c1d-report.pdf
    filemanager open 1718000000000-k3j9x0a8b2c1d-report.pdf

The API root defaults to $FILEMANAGER_URL or http://localhost:8000.
"""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from filemanager.client.api import FileManagerClient, SelectedFile
from filemanager.client.formatting import format_file_size, format_upload_speed
from filemanager.client.notifications import Notifier
from filemanager.client.orchestrator import Snapshot, UploadOrchestrator, UploadStatus
from filemanager.client.view import FileListView

DEFAULT_BASE_URL = "http://localhost:8000"


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal."""
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def print_url(url: str) -> None:
    print(url)


def format_task_line(index: int, task) -> str:
    line = f"{index + 1:>3}. {task.file.name} ({format_file_size(task.file.size)}) {task.status_label}"
    if task.status in (UploadStatus.UPLOADING, UploadStatus.PROCESSING):
        line += f" {task.progress}%"
    if task.status is UploadStatus.UPLOADING:
        line += f" {format_upload_speed(task.speed)}"
    if task.status is UploadStatus.COMPLETED and task.url:
        line += f" -> {task.url}"
    return line


class ProgressPrinter:
    """Prints a line whenever a task's status or progress changes."""

    def __init__(self, orchestrator: UploadOrchestrator, stream=None):
        self._orchestrator = orchestrator
        self._stream = stream or sys.stdout
        self._last: dict = {}

    def __call__(self, snapshot: Snapshot) -> None:
        for index, task in enumerate(snapshot):
            state = (task.status, task.progress)
            if self._last.get(id(task.file)) == state:
                continue
            self._last[id(task.file)] = state
            self._stream.write(
                f"{format_task_line(index, task)}  "
                f"[total {round(self._orchestrator.total_progress)}%]\n"
            )
        self._stream.flush()


async def cmd_upload(api: FileManagerClient, notifier: Notifier, paths: List[str]) -> int:
    orchestrator = UploadOrchestrator(api, notifier)
    orchestrator.subscribe(ProgressPrinter(orchestrator))

    files = []
    for path in paths:
        try:
            files.append(SelectedFile.from_path(Path(path)))
        except OSError as e:
            notifier.error(f"Cannot read {path}: {e.strerror or e}")
    orchestrator.add_files(files)

    ok = await orchestrator.upload_all()
    return 0 if ok else 1


async def cmd_list(api: FileManagerClient, notifier: Notifier) -> int:
    view = FileListView(api, notifier)
    if not await view.refresh():
        return 1
    print(view.render())
    return 0


async def _find_entry(view: FileListView, notifier: Notifier, key: str):
    if not await view.refresh():
        return None
    entry = view.find(key)
    if entry is None:
        notifier.error(f"File not found: {key}")
    return entry


async def cmd_delete(api: FileManagerClient, notifier: Notifier, key: str, assume_yes: bool) -> int:
    view = FileListView(api, notifier, confirm=(lambda _prompt: True) if assume_yes else confirm)
    entry = await _find_entry(view, notifier, key)
    if entry is None:
        return 1
    return 0 if await view.delete(entry) else 1


async def cmd_url(api: FileManagerClient, notifier: Notifier, key: str) -> int:
    view = FileListView(api, notifier, clipboard=print_url)
    entry = await _find_entry(view, notifier, key)
    if entry is None:
        return 1
    view.copy_url(entry)
    return 0


async def cmd_open(api: FileManagerClient, notifier: Notifier, key: str) -> int:
    view = FileListView(api, notifier)
    entry = await _find_entry(view, notifier, key)
    if entry is None:
        return 1
    view.open_url(entry)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filemanager",
        description="Upload, list and delete files in the file manager"
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("FILEMANAGER_URL", DEFAULT_BASE_URL),
        help="API root URL (default: $FILEMANAGER_URL or %(default)s)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload one or more files")
    upload.add_argument("paths", nargs="+", help="Files to upload")

    subparsers.add_parser("list", help="List stored files")

    delete = subparsers.add_parser("delete", help="Delete a stored file")
    delete.add_argument("key", help="Object key")
    delete.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    url = subparsers.add_parser("url", help="Print the signed URL of a file")
    url.add_argument("key", help="Object key")

    open_ = subparsers.add_parser("open", help="Open a file in the browser")
    open_.add_argument("key", help="Object key")

    return parser


async def run(args: argparse.Namespace, api: Optional[FileManagerClient] = None) -> int:
    notifier = Notifier()
    async with (api or FileManagerClient(args.base_url)) as client:
        if args.command == "upload":
            return await cmd_upload(client, notifier, args.paths)
        if args.command == "list":
            return await cmd_list(client, notifier)
        if args.command == "delete":
            return await cmd_delete(client, notifier, args.key, args.yes)
        if args.command == "url":
            return await cmd_url(client, notifier, args.key)
        if args.command == "open":
            return await cmd_open(client, notifier, args.key)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
