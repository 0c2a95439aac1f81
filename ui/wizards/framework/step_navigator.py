# -*- coding: utf-8 -*-
"""
Step Navigator - Manages navigation between wizard steps.

Handles:
- Step progression (next/previous), clamped to the step range
- Step validation before forward navigation
- Direct jumps back to previously visited steps
- Progress tracking
"""

from typing import Callable, List, Optional
from PyQt5.QtCore import QObject, pyqtSignal

from .step_definition import StepDefinition, StepValidationResult
from .wizard_context import WizardContext
from utils.logger import get_logger

logger = get_logger(__name__)

StepValidator = Callable[[StepDefinition], StepValidationResult]


class StepNavigator(QObject):
    """
    Manages navigation between wizard steps.

    Responsibilities:
    - Track current step
    - Validate before moving forward
    - Emit signals for presentation updates

    Steps are addressed by their 1-based id; the navigator keeps a 0-based
    index internally.
    """

    # Signals
    step_changed = pyqtSignal(int, int)  # old_step_id, new_step_id
    validation_failed = pyqtSignal(object)  # StepValidationResult

    def __init__(self, context: WizardContext, steps: List[StepDefinition], validator: StepValidator):
        """
        Initialize the navigator.

        Args:
            context: Wizard context (receives current step and completed steps)
            steps: Ordered step definitions
            validator: Callable validating a step against the live context
        """
        super().__init__()
        self.context = context
        self.steps = steps
        self.validator = validator
        self.current_index = 0
        self.furthest_index = 0
        self.context.current_step_id = self.steps[0].id

    def get_current_step(self) -> Optional[StepDefinition]:
        """Get the current step."""
        if 0 <= self.current_index < len(self.steps):
            return self.steps[self.current_index]
        return None

    @property
    def current_step_id(self) -> int:
        return self.steps[self.current_index].id

    def get_step(self, step_id: int) -> Optional[StepDefinition]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def is_last_step(self) -> bool:
        return self.current_index == len(self.steps) - 1

    def can_go_next(self) -> bool:
        """Check if there is a step after the current one."""
        return self.current_index < len(self.steps) - 1

    def can_go_previous(self) -> bool:
        """Check if we can navigate to the previous step."""
        return self.current_index > 0

    def next_step(self, skip_validation: bool = False) -> StepValidationResult:
        """
        Validate the current step and move forward.

        On the last step a passing validation marks it completed and the
        position stays put.

        Returns:
            The validation result of the departing step
        """
        current_step = self.get_current_step()

        if skip_validation:
            result = StepValidationResult()
        else:
            logger.debug(f"Validating step {current_step.id} ({current_step.key})...")
            result = self.validator(current_step)
            if not result.is_valid:
                logger.warning(f"Step {current_step.id} validation failed: {result.errors}")
                self.validation_failed.emit(result)
                return result

        self.context.mark_step_completed(current_step.id)

        if not self.can_go_next():
            logger.debug(f"Already at last step ({current_step.id}), staying")
            return result

        logger.info(f"Navigating: Step {current_step.id} → {current_step.id + 1}")
        self._navigate_to(self.current_index + 1)
        return result

    def previous_step(self) -> bool:
        """Navigate to the previous step. Never validates."""
        if not self.can_go_previous():
            logger.debug(f"Cannot go previous: already at first step ({self.current_step_id})")
            return False

        logger.info(f"Navigating back: Step {self.current_step_id} → {self.current_step_id - 1}")
        return self._navigate_to(self.current_index - 1)

    def goto_step(self, step_id: int) -> bool:
        """
        Jump directly to a step without sequential validation.

        Only steps already visited are reachable.
        """
        target_index = self._index_of(step_id)
        if target_index is None:
            logger.error(f"Invalid step id: {step_id}")
            return False

        if target_index == self.current_index:
            return True

        if target_index > self.furthest_index:
            logger.warning(f"Refusing jump to unvisited step {step_id}")
            return False

        return self._navigate_to(target_index)

    def _index_of(self, step_id: int) -> Optional[int]:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return None

    def _navigate_to(self, new_index: int) -> bool:
        if new_index < 0 or new_index >= len(self.steps):
            logger.error(f"Invalid step index: {new_index} (valid range: 0-{len(self.steps)-1})")
            return False

        old_id = self.current_step_id
        self.current_index = new_index
        self.furthest_index = max(self.furthest_index, new_index)
        self.context.current_step_id = self.current_step_id

        self.step_changed.emit(old_id, self.current_step_id)
        logger.info(f"Navigation complete: Step {self.current_step_id} ({self.steps[new_index].key}) is now active")
        return True

    def get_progress_percentage(self) -> float:
        """
        Get current progress as percentage.

        Returns:
            Progress percentage (0.0 to 100.0)
        """
        if len(self.steps) <= 1:
            return 0.0
        return (self.current_index / (len(self.steps) - 1)) * 100.0
