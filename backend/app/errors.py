"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; main.py registers a single
exception handler that renders them as {"error": message}.
"""
import functools
import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

from app.utils.logging import log_operation_failed
from app.utils.metrics import errors_total

logger = logging.getLogger(__name__)


class PortalError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(PortalError):
    """No valid session for the request."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(PortalError):
    """Caller is authenticated but lacks the role for this action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class InvalidArgument(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(PortalError):
    """Row is absent or outside the caller's scope."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Internal(PortalError):
    """Storage or database call failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def internal_errors(operation: str):
    """
    Decorator for async service operations.

    Domain errors pass through unchanged. Storage and database failures are
    logged with the operation name and re-raised as Internal.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PortalError:
                raise
            except (SQLAlchemyError, ClientError, BotoCoreError, RuntimeError) as e:
                log_operation_failed(logger, operation, str(e))
                errors_total.labels(error_type="internal").inc()
                raise Internal(f"Failed to {operation.replace('_', ' ')}") from e
        return wrapper
    return decorator
