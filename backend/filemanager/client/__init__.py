"""
Async client for the file manager API: upload queue, file list view and CLI.
"""
from filemanager.client.api import FileManagerAPIError, FileManagerClient, SelectedFile
from filemanager.client.notifications import Notifier
from filemanager.client.orchestrator import UploadOrchestrator, UploadStatus, UploadTask
from filemanager.client.view import FileEntry, FileListView

__all__ = [
    "FileManagerAPIError",
    "FileManagerClient",
    "SelectedFile",
    "Notifier",
    "UploadOrchestrator",
    "UploadStatus",
    "UploadTask",
    "FileEntry",
    "FileListView",
]
