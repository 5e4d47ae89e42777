"""
Async HTTP client for the file manager API.

Uploads are sent as a streamed multipart body so the caller can observe
how many bytes have been handed to the transport, the same way a browser
reports upload progress.
"""
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional

import httpx
from pydantic import ValidationError

from filemanager.schemas.files import StoredObject, UploadResponse

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = httpx.Timeout(30.0, write=None)
# The upload response arrives only after the server has stored the object
UPLOAD_TIMEOUT = httpx.Timeout(30.0, read=None, write=None)

ProgressCallback = Callable[[int, int], None]


class FileManagerAPIError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


@dataclass(frozen=True)
class SelectedFile:
    """A file picked for upload: its name, bytes and MIME type."""
    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path) -> "SelectedFile":
        """Read a local file, guessing its MIME type from the name."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            data=path.read_bytes(),
            content_type=content_type or "application/octet-stream"
        )


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail) if detail else response.reason_phrase


class FileManagerClient:
    """
    Client for the upload, list and delete endpoints.

    Usage:
        async with FileManagerClient("http://localhost:8000") as api:
            files = await api.list_files()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.AsyncClient] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        """
        Args:
            base_url: API root (ignored when http_client is given)
            http_client: Pre-built client, e.g. one using ASGITransport
            chunk_size: Bytes per progress step when uploading
        """
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=DEFAULT_TIMEOUT)
        self._chunk_size = chunk_size

    async def __aenter__(self) -> "FileManagerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if not response.is_success:
            raise FileManagerAPIError(response.status_code, _error_detail(response))

    async def list_files(self) -> List[StoredObject]:
        """
        Fetch all stored files with their signed URLs.

        Raises:
            FileManagerAPIError: On a non-2xx response
            httpx.HTTPError: On transport failure
        """
        response = await self._http.get("/api/list")
        self._check(response)
        return [StoredObject.model_validate(item) for item in response.json()]

    async def delete_file(self, key: str) -> str:
        """
        Delete a file by key.

        Returns:
            Confirmation message from the server
        """
        response = await self._http.delete("/api/delete", params={"key": key})
        self._check(response)
        return response.json().get("message", "")

    async def upload_file(
        self,
        file: SelectedFile,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResponse:
        """
        Upload one file as multipart field 'file'.

        on_progress(sent, total) is called after each chunk of the request
        body is consumed by the transport; the last call has sent == total.

        Returns:
            UploadResponse; url is empty if the body could not be parsed

        Raises:
            FileManagerAPIError: On a non-2xx response
            httpx.HTTPError: On transport failure
        """
        # Encode the multipart body once so its length is known up front
        multipart = self._http.build_request(
            "POST",
            "/api/upload",
            files={"file": (file.name, file.data, file.content_type)}
        )
        body = multipart.read()
        total = len(body)

        async def body_stream() -> AsyncIterator[bytes]:
            sent = 0
            for start in range(0, total, self._chunk_size):
                chunk = body[start:start + self._chunk_size]
                yield chunk
                sent += len(chunk)
                if on_progress is not None:
                    on_progress(sent, total)

        response = await self._http.post(
            "/api/upload",
            content=body_stream(),
            headers={
                "Content-Type": multipart.headers["Content-Type"],
                "Content-Length": str(total),
            },
            timeout=UPLOAD_TIMEOUT
        )
        self._check(response)

        try:
            return UploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse upload response for {file.name}: {e}")
            return UploadResponse(success=True, url="")
