# backend/tracker/exceptions.py
import logging

from django.db import DatabaseError, IntegrityError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class TrackerError(exceptions.APIException):
    """Base class for every failure the progress service reports to a caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "tracker_error"


class NotFound(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Problem not found in your list."
    default_code = "not_found"


class Unauthenticated(TrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "No authentication token, access denied."
    default_code = "unauthenticated"


class Conflict(TrackerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This problem is already being tracked."
    default_code = "conflict"


class ValidationError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class StorageError(TrackerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is unavailable, try again later."
    default_code = "storage_error"


class UpstreamError(TrackerError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Failed to fetch images."
    default_code = "upstream_error"


def _flatten(detail):
    """Turns DRF's nested error detail into one human readable line."""
    if isinstance(detail, dict):
        parts = []
        for field, errors in detail.items():
            message = _flatten(errors)
            parts.append(message if field == "non_field_errors" else f"{field}: {message}")
        return "; ".join(parts)
    if isinstance(detail, list):
        return " ".join(_flatten(item) for item in detail)
    return str(detail)


def tracker_exception_handler(exc, context):
    """
    DRF exception handler that renders every failure as the
    {"success": false, "message": ...} envelope the client expects.
    """
    if isinstance(exc, IntegrityError):
        exc = Conflict()
    elif isinstance(exc, DatabaseError):
        logger.error("Database error in %s: %s", context.get("view"), exc)
        exc = StorageError()
    elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        auth_header = getattr(exc, "auth_header", None)
        exc = Unauthenticated(detail=exc.detail)
        exc.auth_header = auth_header

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data:
        data = data["detail"]
    response.data = {"success": False, "message": _flatten(data)}
    return response
