# -*- coding: utf-8 -*-
"""
Wizard Context - Base class for wizard session state.

Provides:
- Session identity and reference number (for logs)
- Lifecycle status (open, submitting, completed, cancelled)
- Step completion tracking
- Serialization to a plain dict (debug snapshots only, never persisted)
"""

from typing import Dict, Any, Optional, Set
from datetime import datetime
from abc import ABC, abstractmethod
import uuid


class WizardStatus:
    """Lifecycle states of a wizard session."""
    OPEN = "open"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    CLOSED = (COMPLETED, CANCELLED)


class WizardContext(ABC):
    """
    Base class for wizard context.

    Subclasses own their form fields and implement:
    - to_dict(): serialize the form fields (call super().to_dict())
    - from_dict(): restore a context from a snapshot
    """

    def __init__(self):
        self.wizard_id: str = str(uuid.uuid4())
        self.status: str = WizardStatus.OPEN
        self.created_at: datetime = datetime.now()
        self.updated_at: datetime = datetime.now()
        self.current_step_id: Optional[int] = None
        self.completed_steps: Set[int] = set()
        self.reference_number: str = self._generate_reference_number()

    def _generate_reference_number(self) -> str:
        """
        Reference number for the session, used to correlate log lines.

        Format: {PREFIX}-{YYYYMMDDHHMMSS}-{SHORT_UUID}
        """
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        short_id = self.wizard_id[:4].upper()
        return f"{self._get_reference_prefix()}-{timestamp}-{short_id}"

    def _get_reference_prefix(self) -> str:
        """Prefix for the reference number. Override in subclasses."""
        return "WIZ"

    @property
    def is_closed(self) -> bool:
        return self.status in WizardStatus.CLOSED

    def touch(self):
        self.updated_at = datetime.now()

    def mark_step_completed(self, step_id: int):
        self.completed_steps.add(step_id)
        self.touch()

    def is_step_completed(self, step_id: int) -> bool:
        return step_id in self.completed_steps

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wizard_id": self.wizard_id,
            "reference_number": self.reference_number,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "current_step_id": self.current_step_id,
            "completed_steps": sorted(self.completed_steps),
        }

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WizardContext':
        pass

    @classmethod
    def _restore_base_fields(cls, context: 'WizardContext', data: Dict[str, Any]):
        """Helper method to restore base fields from dictionary."""
        context.wizard_id = data.get("wizard_id", context.wizard_id)
        context.reference_number = data.get("reference_number", context.reference_number)
        context.status = data.get("status", WizardStatus.OPEN)
        context.current_step_id = data.get("current_step_id")
        context.completed_steps = set(data.get("completed_steps", []))

        if "created_at" in data:
            context.created_at = datetime.fromisoformat(data["created_at"])
        if "updated_at" in data:
            context.updated_at = datetime.fromisoformat(data["updated_at"])
