"""
Upload orchestrator.

Owns the queue of selected files and uploads them one at a time, tracking
progress, speed and status per file.

Task lifecycle:
    waiting -> uploading -> processing -> completed
                    \\            \\
                     +-> error    +-> error

- uploading: request body is being sent
- processing: body fully sent (100%), waiting for the server response
- completed / error: terminal for one pass; upload_all() re-queues every
  task that is not completed

The orchestrator is the only writer of the task list. Tasks are immutable
and replaced on every change; subscribers receive a tuple snapshot. Tasks
are addressed by task_id, so removing a finished task while a pass runs
does not redirect updates to another one.
"""
import itertools
import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

import httpx

from filemanager.client.api import FileManagerAPIError, FileManagerClient, SelectedFile
from filemanager.client.notifications import Notifier

logger = logging.getLogger(__name__)


class UploadStatus(str, Enum):
    WAITING = "waiting"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


IN_FLIGHT = (UploadStatus.UPLOADING, UploadStatus.PROCESSING)

STATUS_LABELS = {
    UploadStatus.WAITING: "Waiting",
    UploadStatus.UPLOADING: "Uploading",
    UploadStatus.PROCESSING: "Processing",
    UploadStatus.COMPLETED: "Done",
    UploadStatus.ERROR: "Failed",
}

_task_ids = itertools.count(1)


@dataclass(frozen=True)
class UploadTask:
    """Upload state of one selected file."""
    file: SelectedFile
    progress: int = 0
    uploaded_bytes: int = 0
    speed: float = 0.0
    status: UploadStatus = UploadStatus.WAITING
    url: Optional[str] = None
    task_id: int = field(default_factory=lambda: next(_task_ids))

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    def is_duplicate_of(self, file: SelectedFile) -> bool:
        return self.file.name == file.name and self.file.size == file.size


Snapshot = Tuple[UploadTask, ...]
Listener = Callable[[Snapshot], None]


class UploadInProgressError(RuntimeError):
    """Raised when the queue is modified in a way an active upload forbids."""


class UploadOrchestrator:
    """
    Sequential uploader with per-file progress tracking.

    Args:
        api: Client used to send each file
        notifier: Receives success/error/info notifications
        on_success: Called once after a pass in which every task completed
        clock: Monotonic time source in seconds, used for speed
    """

    def __init__(
        self,
        api: FileManagerClient,
        notifier: Notifier,
        on_success: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._api = api
        self._notifier = notifier
        self._on_success = on_success
        self._clock = clock
        self._tasks: List[UploadTask] = []
        self._listeners: List[Listener] = []
        self._running = False

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> Snapshot:
        return tuple(self._tasks)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def total_progress(self) -> float:
        """Unweighted mean of per-task progress (0 for an empty queue)."""
        if not self._tasks:
            return 0.0
        return sum(task.progress for task in self._tasks) / len(self._tasks)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for task snapshots.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _publish(self) -> None:
        snapshot = self.tasks
        for listener in list(self._listeners):
            listener(snapshot)

    def _find(self, task_id: int) -> Optional[int]:
        return next(
            (index for index, task in enumerate(self._tasks) if task.task_id == task_id),
            None
        )

    def _update(self, task_id: int, **changes) -> None:
        index = self._find(task_id)
        if index is None:
            # Removed from the queue since the update was scheduled
            return
        self._tasks[index] = replace(self._tasks[index], **changes)
        self._publish()

    # ------------------------------------------------------------------
    # Queue management
    # ------------------------------------------------------------------

    def add_files(self, files: Iterable[SelectedFile]) -> int:
        """
        Queue files for upload.

        A file with the same name and size as a queued task (including one
        added earlier in the same call) is discarded.

        Returns:
            Number of files actually added
        """
        added = 0
        for file in files:
            if any(task.is_duplicate_of(file) for task in self._tasks):
                logger.debug(f"Skipping duplicate file {file.name} ({file.size} bytes)")
                continue
            self._tasks.append(UploadTask(file=file))
            added += 1

        if added:
            self._publish()
        return added

    def remove(self, index: int) -> UploadTask:
        """
        Remove one task from the queue.

        Raises:
            IndexError: If index is out of range
            UploadInProgressError: If the task is being uploaded
        """
        task = self._tasks[index]
        if task.status in IN_FLIGHT:
            raise UploadInProgressError(f"{task.file.name} is being uploaded")
        del self._tasks[index]
        self._publish()
        return task

    def clear(self) -> int:
        """
        Remove every task that is not in flight.

        Returns:
            Number of tasks removed
        """
        before = len(self._tasks)
        self._tasks = [task for task in self._tasks if task.status in IN_FLIGHT]
        removed = before - len(self._tasks)
        if removed:
            self._publish()
        return removed

    # ------------------------------------------------------------------
    # Uploading
    # ------------------------------------------------------------------

    async def upload_all(self) -> bool:
        """
        Upload every task that is not completed, one at a time, in order.

        Returns:
            True if every task is completed after the pass
        """
        if self._running:
            raise UploadInProgressError("An upload pass is already running")

        if not self._tasks:
            self._notifier.error("Select files first")
            return False
        if all(task.status is UploadStatus.COMPLETED for task in self._tasks):
            self._notifier.info("All files have already been uploaded")
            return True

        self._running = True
        try:
            self._tasks = [
                task if task.status is UploadStatus.COMPLETED
                else replace(task, progress=0, uploaded_bytes=0, speed=0.0,
                             status=UploadStatus.WAITING, url=None)
                for task in self._tasks
            ]
            self._publish()

            pending = [task.task_id for task in self._tasks if task.status is not UploadStatus.COMPLETED]
            for task_id in pending:
                index = self._find(task_id)
                if index is None:
                    continue
                await self._upload_one(self._tasks[index])
        finally:
            self._running = False

        all_completed = bool(self._tasks) and all(
            task.status is UploadStatus.COMPLETED for task in self._tasks
        )
        if all_completed:
            self._notifier.success("All files uploaded successfully")
            if self._on_success is not None:
                self._on_success()
        return all_completed

    async def _upload_one(self, task: UploadTask) -> None:
        task_id = task.task_id
        started_at = self._clock()
        self._update(task_id, status=UploadStatus.UPLOADING)

        def on_progress(sent: int, total: int) -> None:
            if total and sent < total:
                # 100% means the whole body is sent
                progress = min(round(sent / total * 100), 99)
            else:
                progress = 100
            index = self._find(task_id)
            # Only publish when the percentage advances
            if index is None or progress <= self._tasks[index].progress:
                return
            elapsed = self._clock() - started_at
            self._update(
                task_id,
                progress=progress,
                uploaded_bytes=sent,
                speed=sent / elapsed if elapsed > 0 else 0.0,
                status=UploadStatus.PROCESSING if progress >= 100 else UploadStatus.UPLOADING
            )

        try:
            result = await self._api.upload_file(task.file, on_progress=on_progress)
        except (FileManagerAPIError, httpx.HTTPError) as e:
            logger.error(f"Error uploading {task.file.name}: {e}")
            self._update(task_id, status=UploadStatus.ERROR)
            self._notifier.error(f"Failed to upload {task.file.name}")
            return

        self._update(task_id, status=UploadStatus.COMPLETED, url=result.url)
