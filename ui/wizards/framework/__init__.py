# -*- coding: utf-8 -*-
"""
Wizard Framework - UI-free building blocks for multi-step wizards.

Components:
- WizardContext: base session state (status, completed steps)
- StepDefinition / StepValidationResult: declarative steps and their results
- StepNavigator: validated step-to-step navigation
"""

from .wizard_context import WizardContext, WizardStatus
from .step_definition import StepDefinition, StepValidationResult
from .step_navigator import StepNavigator

__all__ = [
    'WizardContext',
    'WizardStatus',
    'StepDefinition',
    'StepValidationResult',
    'StepNavigator',
]
