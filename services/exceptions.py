# -*- coding: utf-8 -*-
"""Custom exceptions for the document management console."""


class ApiException(Exception):
    """HTTP error returned by the document management backend."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, endpoint: str = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.endpoint = endpoint

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class NetworkException(Exception):
    """Connection, timeout or transport failure talking to the backend."""

    def __init__(self, message: str, original_error: Exception = None,
                 endpoint: str = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.endpoint = endpoint


class ValidationException(Exception):
    """A locally detected constraint violation, attached to a field."""

    def __init__(self, message: str, field: str = None, errors: dict = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or ({field: message} if field else {})


class AssemblyException(ValidationException):
    """FormState cannot be turned into a consistent creation request."""
