"""
FastAPI dependencies.

The object store is built once in the application lifespan and kept on
app.state; handlers receive it through get_object_store so tests can
override it with a fake.
"""
from fastapi import HTTPException, Request, status

from filemanager.storage.base import ObjectStore


def get_object_store(request: Request) -> ObjectStore:
    """Return the process-wide object store."""
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service not configured"
        )
    return store
