# -*- coding: utf-8 -*-
"""
Create-document wizard core: FormState, resolved options and step table.
"""

from .document_context import (
    DocumentFormState,
    ResolvedOptions,
    FIELD_DEFAULTS,
    FIELD_DEPENDENCIES,
    dependents_of,
)
from .steps import (
    DOCUMENT_WIZARD_STEPS,
    CHANNEL_STEPS,
    ResolutionChannel,
    channels_of,
    STEP_RESPONSIBILITY_CENTRE,
    STEP_DATE,
    STEP_TYPE,
    STEP_CUSTOMER_VENDOR,
    STEP_CONTENT,
    STEP_CIRCUIT,
    STEP_REVIEW,
)

__all__ = [
    'DocumentFormState',
    'ResolvedOptions',
    'FIELD_DEFAULTS',
    'FIELD_DEPENDENCIES',
    'dependents_of',
    'DOCUMENT_WIZARD_STEPS',
    'CHANNEL_STEPS',
    'ResolutionChannel',
    'channels_of',
    'STEP_RESPONSIBILITY_CENTRE',
    'STEP_DATE',
    'STEP_TYPE',
    'STEP_CUSTOMER_VENDOR',
    'STEP_CONTENT',
    'STEP_CIRCUIT',
    'STEP_REVIEW',
]
