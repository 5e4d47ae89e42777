"""
File list view.

Turns the stored-object listing into display entries and implements the
per-file actions: copy URL, open URL and delete.
"""
import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import httpx

from filemanager.client.api import FileManagerAPIError, FileManagerClient
from filemanager.client.formatting import get_file_extension, get_file_icon_color, get_file_name
from filemanager.client.notifications import Notifier
from filemanager.schemas.files import StoredObject

logger = logging.getLogger(__name__)

EMPTY_LIST_MESSAGE = "No files uploaded yet"
DELETE_PROMPT = "Are you sure you want to delete this file?"


@dataclass(frozen=True)
class FileEntry:
    """Display data for one stored object."""
    key: str
    url: str
    name: str
    extension: str
    color: str

    @classmethod
    def from_stored(cls, obj: StoredObject) -> "FileEntry":
        name = get_file_name(obj.key)
        extension = get_file_extension(name)
        return cls(
            key=obj.key,
            url=obj.url,
            name=name,
            extension=extension,
            color=get_file_icon_color(extension)
        )


def _deny(_prompt: str) -> bool:
    return False


class FileListView:
    """
    Renders stored files and runs the copy/open/delete actions.

    Args:
        api: API client
        notifier: Receives user-facing notifications
        confirm: Asked before deleting; returns True to proceed
        clipboard: Receives the URL on copy
        opener: Opens a URL in a new browser tab
    """

    def __init__(
        self,
        api: FileManagerClient,
        notifier: Notifier,
        confirm: Callable[[str], bool] = _deny,
        clipboard: Optional[Callable[[str], None]] = None,
        opener: Callable[[str], bool] = webbrowser.open_new_tab
    ):
        self._api = api
        self._notifier = notifier
        self._confirm = confirm
        self._clipboard = clipboard
        self._opener = opener
        self._entries: Tuple[FileEntry, ...] = ()

    @property
    def entries(self) -> Tuple[FileEntry, ...]:
        return self._entries

    def find(self, key: str) -> Optional[FileEntry]:
        return next((entry for entry in self._entries if entry.key == key), None)

    async def refresh(self) -> bool:
        """
        Reload the file list.

        On failure the previous entries are kept.

        Returns:
            True if the list was reloaded
        """
        try:
            objects = await self._api.list_files()
        except (FileManagerAPIError, httpx.HTTPError) as e:
            logger.error(f"Failed to load files: {e}")
            self._notifier.error("Failed to load files")
            return False

        self._entries = tuple(FileEntry.from_stored(obj) for obj in objects)
        return True

    def copy_url(self, entry: FileEntry) -> None:
        if self._clipboard is None:
            raise RuntimeError("No clipboard configured")
        self._clipboard(entry.url)
        self._notifier.success("URL copied to clipboard")

    def open_url(self, entry: FileEntry) -> None:
        self._opener(entry.url)

    async def delete(self, entry: FileEntry) -> bool:
        """
        Delete a file after confirmation, then refresh the list.

        Returns:
            True if the file was deleted
        """
        if not self._confirm(DELETE_PROMPT):
            return False

        try:
            await self._api.delete_file(entry.key)
        except (FileManagerAPIError, httpx.HTTPError) as e:
            logger.error(f"Failed to delete {entry.key}: {e}")
            self._notifier.error("Failed to delete file")
            return False

        self._notifier.success("File deleted successfully")
        await self.refresh()
        return True

    def render(self) -> str:
        """Render the list as text, one file per line."""
        if not self._entries:
            return EMPTY_LIST_MESSAGE

        lines = []
        for entry in self._entries:
            badge = (entry.extension or "file").upper()
            lines.append(f"[{badge:>4}|{entry.color}] {entry.name}  ({entry.key})")
        return "\n".join(lines)
