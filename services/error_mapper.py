# -*- coding: utf-8 -*-
"""Centralized error message mapper."""

from services.exceptions import ApiException, ValidationException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)

MSG_CONNECTION = "Cannot reach the server. Check your connection and try again."
MSG_TIMEOUT = "The server took too long to respond. Please try again."
MSG_UNAUTHORIZED = "Your session has expired. Please sign in again."
MSG_FORBIDDEN = "You are not allowed to perform this action."
MSG_SERVER = "The server could not complete the request."
MSG_UNEXPECTED = "An unexpected error occurred."


def map_api_error(error: ApiException) -> str:
    """Map an API exception to a user-facing message.

    Technical details are logged only; the user sees a short message.
    """
    status = error.status_code

    if status == 400:
        details = _extract_validation_details(error.response_data)
        if details:
            logger.warning(f"API validation error (400): {details}")
            return details
    elif status:
        logger.warning(f"API error ({status}): {error}")

    if status == 401:
        return MSG_UNAUTHORIZED
    if status == 403:
        return MSG_FORBIDDEN
    return MSG_SERVER


def map_network_error(error: NetworkException) -> str:
    """Map a network exception to a user-facing message."""
    msg = str(error.original_error) if error.original_error else error.message
    if "timeout" in msg.lower() or "timed out" in msg.lower():
        return MSG_TIMEOUT
    return MSG_CONNECTION


def map_exception(error: Exception) -> str:
    """Map any exception to a user-facing message."""
    if isinstance(error, ApiException):
        return map_api_error(error)

    if isinstance(error, NetworkException):
        return map_network_error(error)

    if isinstance(error, ValidationException):
        if error.errors:
            logger.warning(f"Validation error: {error.errors}")
        return error.message

    logger.warning(f"Unexpected error: {error!r}")
    return MSG_UNEXPECTED


def _extract_validation_details(response_data: dict) -> str:
    """Extract validation error details from an API response body."""
    if not response_data:
        return ""

    errors = response_data.get("errors", {})
    if isinstance(errors, dict) and errors:
        lines = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                for msg in messages:
                    lines.append(f"• {field}: {msg}")
            else:
                lines.append(f"• {field}: {messages}")
        return "\n".join(lines)

    if isinstance(errors, list) and errors:
        return "\n".join(f"• {e}" for e in errors)

    return response_data.get("title", "") or response_data.get("message", "")
