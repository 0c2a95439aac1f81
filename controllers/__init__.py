# -*- coding: utf-8 -*-
"""
Document Management Controllers
===============================
Controller layer between presentation code and the service layer.

Controllers provide:
- Standardized results via OperationResult
- Qt signals for UI updates
- Validation and business rules

Usage:
    from controllers import build_document_wizard

    controller = build_document_wizard(user_profile)
    result = controller.advance()
    if result.success:
        print(f"Now on step {result.data}")
    else:
        print(f"Error: {result.message}")
"""

# Base controller and result types
from controllers.base_controller import (
    BaseController,
    OperationResult,
)

# Create-document wizard
from controllers.document_wizard_controller import (
    DocumentWizardController,
    build_document_wizard,
)

# All public exports
__all__ = [
    # Base
    "BaseController",
    "OperationResult",

    # Document wizard
    "DocumentWizardController",
    "build_document_wizard",
]
