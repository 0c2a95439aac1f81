# -*- coding: utf-8 -*-
"""
Document Management Data Models
"""

from .document_type import DocumentType, TierType, find_document_type
from .subtype import SubType
from .circuit import Circuit
from .customer_vendor import CustomerVendor
from .responsibility_centre import ResponsibilityCentre, UserProfile

__all__ = [
    "DocumentType",
    "TierType",
    "find_document_type",
    "SubType",
    "Circuit",
    "CustomerVendor",
    "ResponsibilityCentre",
    "UserProfile",
]
