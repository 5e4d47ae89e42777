"""
Pydantic schemas for API request/response validation.
"""
from filemanager.schemas.files import (
    StoredObject,
    UploadResponse,
    DeleteResponse,
)

__all__ = [
    "StoredObject",
    "UploadResponse",
    "DeleteResponse",
]
