"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- user_id
- organization_id
- asset_id
- file_key
- duration_ms

Usage:
    from app.utils.logging import configure_logging, log_upload_confirmed

    configure_logging('portal-api', 'INFO')
    log_upload_confirmed(logger, asset='photo', asset_id='123', user_id='456')
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
            service_name: Service identifier (portal-api, portal-scripts)
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

        # Console handler (for container logs)
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
    user_id: Optional[str] = None,
    organization_id: Optional[str] = None,
    asset_id: Optional[str] = None,
    file_key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        user_id: Optional user ID
        organization_id: Optional organization ID
        asset_id: Optional photo/document ID
        file_key: Optional storage key
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if user_id:
        extra["user_id"] = user_id
    if organization_id:
        extra["organization_id"] = organization_id
    if asset_id:
        extra["asset_id"] = asset_id
    if file_key:
        extra["file_key"] = file_key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_upload_slot_issued(
    logger: logging.Logger,
    asset: str,
    file_key: str,
    user_id: str,
    organization_id: Optional[str] = None,
    **kwargs
):
    """Log presigned upload slot issuance."""
    extra = _build_log_extra(
        event="upload_slot_issued",
        user_id=user_id,
        organization_id=organization_id,
        file_key=file_key,
        asset=asset,
        **kwargs
    )
    logger.info(f"Upload slot issued: {file_key}", extra=extra)


def log_upload_confirmed(
    logger: logging.Logger,
    asset: str,
    asset_id: str,
    user_id: str,
    file_key: Optional[str] = None,
    verified: Optional[bool] = None,
    **kwargs
):
    """
    Log upload confirmation (metadata row persisted).

    Args:
        logger: Logger instance
        asset: "photo" or "document"
        asset_id: Row ID (required)
        user_id: Uploader ID (required)
        file_key: Storage key
        verified: Whether the object was checked in storage first
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_confirmed",
        user_id=user_id,
        asset_id=asset_id,
        file_key=file_key,
        asset=asset,
        **kwargs
    )
    if verified is not None:
        extra["verified"] = verified

    logger.info(f"Upload confirmed: {asset} {asset_id}", extra=extra)


def log_asset_deleted(
    logger: logging.Logger,
    asset: str,
    asset_id: str,
    user_id: str,
    storage_deleted: bool,
    **kwargs
):
    """Log asset deletion, noting whether the storage object was removed."""
    extra = _build_log_extra(
        event="asset_deleted",
        user_id=user_id,
        asset_id=asset_id,
        asset=asset,
        storage_deleted=storage_deleted,
        **kwargs
    )
    logger.info(f"Deleted {asset} {asset_id}", extra=extra)


def log_storage_cleanup_failed(
    logger: logging.Logger,
    file_key: str,
    error: Optional[str] = None,
    **kwargs
):
    """
    Log a failed storage delete during asset deletion.

    Non-fatal: the metadata row is still removed and the object may leak.
    """
    extra = _build_log_extra(
        event="storage_cleanup_failed",
        file_key=file_key,
        **kwargs
    )
    if error:
        extra["error"] = str(error)

    logger.warning(f"Failed to delete {file_key} from storage", extra=extra)


def log_operation_failed(
    logger: logging.Logger,
    operation: str,
    error: str,
    user_id: Optional[str] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log a storage or database failure that is surfaced as an internal error.

    Args:
        logger: Logger instance
        operation: Service operation name (required)
        error: Error message (required)
        user_id: Optional caller ID
        include_traceback: Whether to include stack trace
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="operation_failed",
        user_id=user_id,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Operation failed: {operation} - {error}"

    exc_info = sys.exc_info() if include_traceback else None
    if exc_info and exc_info[0] is not None:
        logger.error(message, extra=extra, exc_info=exc_info)
    else:
        logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
