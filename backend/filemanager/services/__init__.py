"""
Service layer for business logic.
"""
from filemanager.services.file_service import FileService

__all__ = [
    "FileService",
]
