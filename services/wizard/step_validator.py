# -*- coding: utf-8 -*-
"""
Step validation service for the Create Document Wizard.

Validates FormState for each step without UI coupling. Validation is pure:
values a step derives (the default title) are returned in
StepValidationResult.derived_values and applied by the controller.
"""

from typing import Optional

from app.config import Config
from ui.wizards.create_document.document_context import DocumentFormState, ResolvedOptions
from ui.wizards.create_document.steps import (
    ResolutionChannel,
    STEP_RESPONSIBILITY_CENTRE,
    STEP_DATE,
    STEP_TYPE,
    STEP_CUSTOMER_VENDOR,
    STEP_CONTENT,
    STEP_CIRCUIT,
    STEP_REVIEW,
)
from ui.wizards.framework.step_definition import StepValidationResult
from utils.datetime_utils import parse_date


def derive_title(content: str, max_length: int = Config.TITLE_MAX_LENGTH,
                 ellipsis: str = Config.TITLE_ELLIPSIS) -> str:
    """First line of content, truncated to max_length with an ellipsis marker."""
    first_line = (content or "").split("\n")[0].strip()
    if len(first_line) > max_length:
        return first_line[:max_length] + ellipsis
    return first_line


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class StepValidator:
    """Validates wizard step data based on context."""

    # Step constants
    STEP_RESPONSIBILITY_CENTRE = STEP_RESPONSIBILITY_CENTRE
    STEP_DATE = STEP_DATE
    STEP_TYPE = STEP_TYPE
    STEP_CUSTOMER_VENDOR = STEP_CUSTOMER_VENDOR
    STEP_CONTENT = STEP_CONTENT
    STEP_CIRCUIT = STEP_CIRCUIT
    STEP_REVIEW = STEP_REVIEW

    @staticmethod
    def validate_step(step_id: int, form: DocumentFormState, options: ResolvedOptions) -> StepValidationResult:
        """
        Validate step data from the form state.

        Args:
            step_id: 1-based step id
            form: DocumentFormState
            options: Option sets resolved for the form

        Returns:
            StepValidationResult (field-level errors, warnings, derived values)
        """
        validators = {
            STEP_RESPONSIBILITY_CENTRE: StepValidator._validate_responsibility_centre,
            STEP_DATE: StepValidator._validate_dates,
            STEP_TYPE: StepValidator._validate_type,
            STEP_CUSTOMER_VENDOR: StepValidator._validate_customer_vendor,
            STEP_CONTENT: StepValidator._validate_content,
            STEP_CIRCUIT: StepValidator._validate_circuit,
        }
        result = StepValidationResult()
        validator = validators.get(step_id)
        if validator is not None:
            validator(form, options, result)
        # Review (and unknown steps) always pass
        return result

    @staticmethod
    def validate_all(form: DocumentFormState, options: ResolvedOptions,
                     up_to: Optional[int] = None) -> StepValidationResult:
        """Validate every step before `up_to` (all steps when None) into one result."""
        combined = StepValidationResult()
        last = up_to if up_to is not None else STEP_REVIEW + 1
        for step_id in range(STEP_RESPONSIBILITY_CENTRE, last):
            result = StepValidator.validate_step(step_id, form, options)
            if not result.is_valid:
                combined.is_valid = False
            combined.errors.extend(result.errors)
            for field_name, message in result.field_errors.items():
                combined.field_errors.setdefault(field_name, message)
            combined.warnings.extend(result.warnings)
            combined.derived_values.update(result.derived_values)
        return combined

    # ==================== Per-step rules ====================

    @staticmethod
    def _validate_responsibility_centre(form, options, result: StepValidationResult):
        if form.responsibility_centre_locked:
            return

        if form.responsibility_centre_id is None:
            error = options.errors.get(ResolutionChannel.RESPONSIBILITY_CENTRES)
            if error:
                result.add_error(f"{error} Retry loading responsibility centres.",
                                 "responsibility_centre_id")
            else:
                result.add_error("Please select a responsibility centre.", "responsibility_centre_id")
            return

        centres = options.responsibility_centres
        if centres is not None and options.responsibility_centre(form.responsibility_centre_id) is None:
            result.add_error("The selected responsibility centre is not available.",
                             "responsibility_centre_id")

    @staticmethod
    def _validate_dates(form, options, result: StepValidationResult):
        if _is_blank(form.doc_date):
            result.add_error("Document date is required.", "doc_date")
        elif parse_date(form.doc_date) is None:
            result.add_error("Document date is not a valid date.", "doc_date")

        if not _is_blank(form.comptable_date) and parse_date(form.comptable_date) is None:
            result.add_error("Accounting date is not a valid date.", "comptable_date")

    @staticmethod
    def _validate_type(form, options, result: StepValidationResult):
        if form.selected_type_id is None:
            result.add_error("Please select a document type.", "selected_type_id")
            return

        if options.document_type(form.selected_type_id) is None:
            result.add_error("The selected document type is not available.", "selected_type_id")
            return

        valid_types = options.types_for_date
        if valid_types is not None and form.selected_type_id not in [t.id for t in valid_types]:
            result.add_error("The selected document type has no active series on the document date.",
                             "selected_type_id")
            return

        subtype_error = options.errors.get(ResolutionChannel.SUBTYPES)
        if subtype_error:
            result.add_error(f"{subtype_error} Retry loading series.", "selected_sub_type_id")
            return

        if form.selected_sub_type_id is None:
            if options.subtypes is not None and len(options.subtypes) == 0:
                result.add_error("No valid series available for this document type on the selected date. "
                                 "Select a different document type or date.", "selected_sub_type_id")
            else:
                result.add_error("Please select a series.", "selected_sub_type_id")
            return

        subtype = options.subtype(form.selected_sub_type_id)
        if subtype is None:
            result.add_error("The selected series is not available for this document type.",
                             "selected_sub_type_id")
        elif not subtype.is_eligible_on(form.doc_date):
            result.add_error("The selected series is not valid on the document date.",
                             "selected_sub_type_id")

    @staticmethod
    def _validate_customer_vendor(form, options, result: StepValidationResult):
        tier_type = options.tier_type_for(form.selected_type_id)
        if not tier_type.requires_customer_vendor:
            return

        catalogue_error = options.errors.get(ResolutionChannel.CUSTOMER_VENDORS)
        if catalogue_error and form.selected_customer_vendor is None:
            result.add_error(f"{catalogue_error} Retry loading {tier_type.label}s.",
                             "selected_customer_vendor")
            return

        entity = form.selected_customer_vendor
        if entity is None:
            result.add_error(f"Please select a {tier_type.label}.", "selected_customer_vendor")
            return

        if _is_blank(entity.code_for(tier_type)):
            result.add_error(f"The selected {tier_type.label} has no code.",
                             "selected_customer_vendor")
        if _is_blank(form.customer_vendor_name):
            result.add_error(f"{tier_type.label.capitalize()} name is required.", "customer_vendor_name")

    @staticmethod
    def _validate_content(form, options, result: StepValidationResult):
        if _is_blank(form.content):
            result.add_error("Document content is required.", "content")
            return

        if form.is_external and _is_blank(form.external_reference):
            result.add_error("External reference is required for external documents.", "external_reference")
            return

        if _is_blank(form.title):
            title = derive_title(form.content)
            result.derived_values["title"] = title
            result.add_info(f"Title set from content: {title}")

    @staticmethod
    def _validate_circuit(form, options, result: StepValidationResult):
        circuit_error = options.errors.get(ResolutionChannel.CIRCUITS)
        if circuit_error:
            result.add_error(f"{circuit_error} Retry loading circuits.", "circuit_id")
            return

        if form.circuit_id is not None and options.circuit(form.circuit_id) is None:
            result.add_error("The selected circuit is not available for this document type.", "circuit_id")
            return

        if options.circuits is not None and len(options.circuits) == 0:
            result.add_warning("No active circuits available for assignment. "
                               "You can continue without assigning a circuit.")
