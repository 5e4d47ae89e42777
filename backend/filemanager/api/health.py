"""
Health check endpoint.
Verifies the configured bucket is reachable.
"""
from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from filemanager.dependencies import get_object_store
from filemanager.storage.base import ObjectStore, StorageError

router = APIRouter()


@router.get("")
async def health_check(store: ObjectStore = Depends(get_object_store)):
    """
    Health check endpoint.
    Returns status of the object store connection.
    """
    health_status = {
        "status": "healthy",
        "storage": "unknown"
    }

    try:
        await run_in_threadpool(store.check_connection)
        health_status["storage"] = "connected"
    except StorageError as e:
        health_status["storage"] = f"error: {e.reason or e}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
