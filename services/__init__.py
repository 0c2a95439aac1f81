# -*- coding: utf-8 -*-
"""
Document Management Service Layer
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "ConstraintResolver",
    "FallbackDataProvider",
    "WizardServices",
    "DocManagementApiClient",
    "get_api_client",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "ConstraintResolver":
        from .constraint_resolver import ConstraintResolver
        return ConstraintResolver
    elif name == "FallbackDataProvider":
        from .fallback_data_provider import FallbackDataProvider
        return FallbackDataProvider
    elif name == "WizardServices":
        from .document_api_service import WizardServices
        return WizardServices
    elif name == "DocManagementApiClient":
        from .api_client import DocManagementApiClient
        return DocManagementApiClient
    elif name == "get_api_client":
        from .api_client import get_api_client
        return get_api_client
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
