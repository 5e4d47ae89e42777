"""
Pydantic schemas for file endpoints.
Shared by the API and the async client.
"""
from pydantic import BaseModel, Field


class StoredObject(BaseModel):
    """An object in the bucket with a temporary download link."""
    key: str = Field(..., description="Object key in the storage bucket")
    url: str = Field(..., description="Presigned GET URL, valid for one hour")

    model_config = {
        "json_schema_extra": {
            "example": {
                "key": "1718000000000-k3j9x0a8b2c1d-report.pdf",
                "url": "https://s3.example.com/files/1718000000000-k3j9x0a8b2c1d-report.pdf?X-Amz-Expires=3600"
            }
        }
    }


class UploadResponse(BaseModel):
    """Response schema for a stored upload."""
    success: bool = Field(True, description="Always true on HTTP 200")
    url: str = Field(..., description="Unsigned, store-addressable object URL")


class DeleteResponse(BaseModel):
    """Response schema for a delete request."""
    message: str
