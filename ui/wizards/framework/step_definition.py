# -*- coding: utf-8 -*-
"""
Step Definition - UI-free description of a wizard step.

A step declares its position, its title, which fields it requires for the
current state, and whether it is semantically applicable. Rendering is left
entirely to the presentation layer.
"""

from typing import Any, Callable, Dict, List
from dataclasses import dataclass, field


@dataclass
class StepValidationResult:
    """Result of step validation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    infos: List[str] = field(default_factory=list)
    # Values the step derives on success (e.g. a title built from content)
    derived_values: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str, field_name: str = None):
        """Add an error message, optionally attached to a field."""
        self.errors.append(message)
        if field_name and field_name not in self.field_errors:
            self.field_errors[field_name] = message
        self.is_valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def add_info(self, message: str):
        self.infos.append(message)

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def _always(context: Any, options: Any) -> bool:
    return True


def _no_fields(context: Any, options: Any) -> List[str]:
    return []


@dataclass(frozen=True)
class StepDefinition:
    """
    One statically ordered wizard step.

    Attributes:
        id: 1-based position of the step
        key: stable identifier used in logs and by presentation code
        title: display title
        required_fields: (context, options) -> field names required right now
        applicability: (context, options) -> whether the step does real work;
                       a non-applicable step is a pass-through, never skipped
    """
    id: int
    key: str
    title: str
    description: str = ""
    required_fields: Callable[[Any, Any], List[str]] = _no_fields
    applicability: Callable[[Any, Any], bool] = _always

    def is_applicable(self, context: Any, options: Any) -> bool:
        return self.applicability(context, options)

    def required_fields_for(self, context: Any, options: Any) -> List[str]:
        return list(self.required_fields(context, options))
