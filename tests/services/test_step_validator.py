# -*- coding: utf-8 -*-
"""
Tests for the create-document step validation rules.
"""

from datetime import date

import pytest

from models import CustomerVendor
from services.wizard.step_validator import StepValidator, derive_title
from ui.wizards.create_document import (
    DocumentFormState,
    ResolutionChannel,
    ResolvedOptions,
    STEP_CIRCUIT,
    STEP_CONTENT,
    STEP_CUSTOMER_VENDOR,
    STEP_DATE,
    STEP_RESPONSIBILITY_CENTRE,
    STEP_REVIEW,
    STEP_TYPE,
)


@pytest.fixture
def form():
    return DocumentFormState(doc_date="2024-03-15")


@pytest.fixture
def options(document_types, series_table, circuits, centres):
    return ResolvedOptions(
        document_types=document_types,
        types_for_date=document_types[:3],
        subtypes=[series_table[1][0]],
        circuits=[c for c in circuits if c.is_eligible_for(1)],
        responsibility_centres=centres,
    )


class TestResponsibilityCentreStep:

    def test_locked_centre_passes(self, profile_with_centre, options):
        form = DocumentFormState(profile_with_centre)
        assert StepValidator.validate_step(STEP_RESPONSIBILITY_CENTRE, form, options).is_valid is True

    def test_centre_required_without_profile_centre(self, form, options):
        result = StepValidator.validate_step(STEP_RESPONSIBILITY_CENTRE, form, options)
        assert result.is_valid is False
        assert "responsibility_centre_id" in result.field_errors

    def test_failed_centre_lookup_is_retryable(self, form, options):
        options.errors[ResolutionChannel.RESPONSIBILITY_CENTRES] = "Cannot reach the server."
        result = StepValidator.validate_step(STEP_RESPONSIBILITY_CENTRE, form, options)
        assert result.is_valid is False
        assert "Retry" in result.field_errors["responsibility_centre_id"]

    def test_selected_centre_passes(self, form, options):
        form.responsibility_centre_id = 2
        assert StepValidator.validate_step(STEP_RESPONSIBILITY_CENTRE, form, options).is_valid is True


class TestDateStep:

    def test_valid_dates(self, form, options):
        form.comptable_date = date(2024, 3, 31)
        assert StepValidator.validate_step(STEP_DATE, form, options).is_valid is True

    def test_missing_doc_date(self, form, options):
        form.doc_date = None
        result = StepValidator.validate_step(STEP_DATE, form, options)
        assert result.field_errors["doc_date"] == "Document date is required."

    def test_unparseable_dates(self, form, options):
        form.doc_date = "2024-02-30"
        form.comptable_date = "tomorrow"
        result = StepValidator.validate_step(STEP_DATE, form, options)
        assert set(result.field_errors) == {"doc_date", "comptable_date"}


class TestTypeStep:

    def test_type_and_series_selected(self, form, options):
        form.selected_type_id = 1
        form.selected_sub_type_id = 11
        assert StepValidator.validate_step(STEP_TYPE, form, options).is_valid is True

    def test_type_required(self, form, options):
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert "selected_type_id" in result.field_errors

    def test_series_required(self, form, options):
        form.selected_type_id = 1
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert "selected_sub_type_id" in result.field_errors

    def test_zero_eligible_series_fails(self, form, options):
        form.selected_type_id = 1
        options.subtypes = []
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert "No valid series" in result.field_errors["selected_sub_type_id"]

    def test_series_outside_resolved_set_fails(self, form, options):
        form.selected_type_id = 1
        form.selected_sub_type_id = 12
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert result.is_valid is False

    def test_series_outside_date_range_fails(self, form, options, series_table):
        form.selected_type_id = 1
        form.selected_sub_type_id = 12
        options.subtypes = [series_table[1][1]]  # valid only in 2020
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert "not valid on the document date" in result.field_errors["selected_sub_type_id"]

    def test_type_without_series_on_date_fails(self, form, options):
        form.selected_type_id = 4
        result = StepValidator.validate_step(STEP_TYPE, form, options)
        assert "no active series" in result.field_errors["selected_type_id"]


class TestCustomerVendorStep:

    def test_tier_none_always_passes(self, form, options):
        form.selected_type_id = 1
        assert StepValidator.validate_step(STEP_CUSTOMER_VENDOR, form, options).is_valid is True

    def test_customer_required_for_customer_tier(self, form, options):
        form.selected_type_id = 2
        result = StepValidator.validate_step(STEP_CUSTOMER_VENDOR, form, options)
        assert "selected_customer_vendor" in result.field_errors

    def test_customer_with_code_and_name_passes(self, form, options, customers):
        form.selected_type_id = 2
        form.seed_customer_vendor(customers[0])
        assert StepValidator.validate_step(STEP_CUSTOMER_VENDOR, form, options).is_valid is True

    def test_customer_tier_requires_customer_code(self, form, options):
        form.selected_type_id = 2
        form.seed_customer_vendor(CustomerVendor(code=None, vendor_code="V1", name="Vendor only"))
        result = StepValidator.validate_step(STEP_CUSTOMER_VENDOR, form, options)
        assert "has no code" in result.field_errors["selected_customer_vendor"]

    def test_blank_display_name_fails(self, form, options, vendors):
        form.selected_type_id = 3
        form.seed_customer_vendor(vendors[0])
        form.customer_vendor_name = "   "
        result = StepValidator.validate_step(STEP_CUSTOMER_VENDOR, form, options)
        assert "customer_vendor_name" in result.field_errors


class TestContentStep:

    def test_content_required(self, form, options):
        result = StepValidator.validate_step(STEP_CONTENT, form, options)
        assert "content" in result.field_errors

    def test_title_derived_from_first_line(self, form, options):
        form.content = "Quarterly results\nSecond line"
        result = StepValidator.validate_step(STEP_CONTENT, form, options)
        assert result.is_valid is True
        assert result.derived_values == {"title": "Quarterly results"}
        assert form.title == ""

    def test_existing_title_is_kept(self, form, options):
        form.content = "Body"
        form.title = "My title"
        result = StepValidator.validate_step(STEP_CONTENT, form, options)
        assert result.derived_values == {}

    def test_external_reference_required(self, form, options):
        form.content = "Body"
        form.is_external = True
        result = StepValidator.validate_step(STEP_CONTENT, form, options)
        assert "external_reference" in result.field_errors


class TestCircuitStep:

    def test_no_circuit_passes(self, form, options):
        assert StepValidator.validate_step(STEP_CIRCUIT, form, options).is_valid is True

    def test_zero_eligible_circuits_only_warns(self, form, options):
        options.circuits = []
        result = StepValidator.validate_step(STEP_CIRCUIT, form, options)
        assert result.is_valid is True
        assert result.has_warnings()

    def test_failed_circuit_lookup_blocks(self, form, options):
        options.errors[ResolutionChannel.CIRCUITS] = "Cannot reach the server."
        result = StepValidator.validate_step(STEP_CIRCUIT, form, options)
        assert result.is_valid is False

    def test_ineligible_circuit_fails(self, form, options):
        form.circuit_id = 4
        assert StepValidator.validate_step(STEP_CIRCUIT, form, options).is_valid is False


def test_review_always_passes(form, options):
    assert StepValidator.validate_step(STEP_REVIEW, form, options).is_valid is True


def test_validate_all_collects_every_step(form, options):
    result = StepValidator.validate_all(form, options)
    assert result.is_valid is False
    assert {"responsibility_centre_id", "selected_type_id", "content"} <= set(result.field_errors)


class TestDeriveTitle:

    def test_short_first_line(self):
        assert derive_title("  Hello  \nworld") == "Hello"

    def test_long_first_line_is_truncated(self):
        title = derive_title("x" * 80)
        assert title == "x" * 50 + "..."

    def test_exactly_fifty_characters(self):
        assert derive_title("y" * 50) == "y" * 50
