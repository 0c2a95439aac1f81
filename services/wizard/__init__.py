# -*- coding: utf-8 -*-
"""
Create-document wizard services: validation, request assembly and
asynchronous resolution dispatch.
"""

from .step_validator import StepValidator, derive_title
from .request_assembler import RequestAssembler
from .resolution_dispatcher import (
    ImmediateDispatcher,
    QThreadDispatcher,
    RequestTracker,
    ResolutionDispatcher,
    ResolutionTicket,
    ResolutionWorker,
    create_dispatcher,
)

__all__ = [
    "StepValidator",
    "derive_title",
    "RequestAssembler",
    "ImmediateDispatcher",
    "QThreadDispatcher",
    "RequestTracker",
    "ResolutionDispatcher",
    "ResolutionTicket",
    "ResolutionWorker",
    "create_dispatcher",
]
