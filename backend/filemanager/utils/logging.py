"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- key
- count
- size_bytes
- duration_ms

Usage:
    from filemanager.utils.logging import configure_logging, log_file_uploaded

    configure_logging('filemanager-api', 'INFO')
    log_file_uploaded(logger, key='1700000000000-abc-report.pdf', size_bytes=1024)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. filemanager-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """Build extra fields for structured logging."""
    extra = {
        "event": event,
        **kwargs
    }

    if key:
        extra["key"] = key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


def log_file_uploaded(
    logger: logging.Logger,
    key: str,
    size_bytes: int,
    content_type: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a successful upload.

    Args:
        logger: Logger instance
        key: Generated object key (required)
        size_bytes: Stored size in bytes (required)
        content_type: Optional MIME type
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="file_uploaded",
        key=key,
        duration_ms=duration_ms,
        size_bytes=size_bytes,
        **kwargs
    )
    if content_type:
        extra["content_type"] = content_type

    logger.info(f"File uploaded: {key}", extra=extra)


def log_files_listed(
    logger: logging.Logger,
    count: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a completed listing with the number of signed URLs returned."""
    extra = _build_log_extra(
        event="files_listed",
        duration_ms=duration_ms,
        count=count,
        **kwargs
    )
    logger.info(f"Listed {count} files", extra=extra)


def log_file_deleted(
    logger: logging.Logger,
    key: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a delete request that the store accepted."""
    extra = _build_log_extra(
        event="file_deleted",
        key=key,
        duration_ms=duration_ms,
        **kwargs
    )
    logger.info(f"File deleted: {key}", extra=extra)


def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log a failed storage operation.

    The error detail stays in the server logs; callers only get a generic
    message.

    Args:
        logger: Logger instance
        operation: Operation name (upload, list, delete) (required)
        error: Error message (required)
        key: Optional object key
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: True)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        key=key,
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage failure: {operation} - {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
            return
    logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
