"""
File endpoints.

1. POST /upload - Store one file from a multipart form
2. GET /list - List stored files with one-hour download links
3. DELETE /delete?key=... - Delete a file by key

Store errors are logged by the service layer and reported to the caller as a
generic 500; nothing about the underlying failure leaves the server.

No endpoint is authenticated. Put an authorization layer in front of this
router before exposing it beyond a prototype.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from filemanager.dependencies import get_object_store
from filemanager.schemas.files import DeleteResponse, StoredObject, UploadResponse
from filemanager.services.file_service import FileService
from filemanager.storage.base import ObjectStore, StorageError

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    store: ObjectStore = Depends(get_object_store)
):
    """
    Upload a single file.

    The object key is `{unix_millis}-{random}-{filename}`, so repeated
    uploads of the same file never overwrite each other.
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    data = await file.read()

    try:
        url = await FileService.upload_file(
            store,
            filename=file.filename or "file",
            data=data,
            content_type=file.content_type
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Upload failed"
        )

    return UploadResponse(success=True, url=url)


@router.get("/list", response_model=List[StoredObject])
async def list_files(store: ObjectStore = Depends(get_object_store)):
    """
    List all stored files.

    Each entry carries a presigned GET URL that expires after one hour.
    The bucket listing is a single unpaginated call.
    """
    try:
        return await FileService.list_files(store)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list files"
        )


@router.delete("/delete", response_model=DeleteResponse)
async def delete_file(
    key: Optional[str] = Query(None, description="Object key to delete"),
    store: ObjectStore = Depends(get_object_store)
):
    """
    Delete a file by key.

    Idempotent: deleting a key that does not exist also succeeds.
    """
    if not key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Key is required"
        )

    try:
        await FileService.delete_file(store, key)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete file"
        )

    return DeleteResponse(message="File deleted successfully")
