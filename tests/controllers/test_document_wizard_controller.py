# -*- coding: utf-8 -*-
"""
Tests for the Document Wizard Controller.

Tests cover:
- Invalidation cascades on date / type changes
- Series auto-selection and the "no valid series" path
- Last-request-wins resolution (stale results are dropped)
- Customer/vendor tier handling and overrides
- Circuit naming and eligibility
- Submission success, failure and the double-submit guard
- Navigation clamping and jumps
"""

from datetime import date

import pytest

from controllers.document_wizard_controller import STATIC_DOCUMENT_LABEL, DocumentWizardController
from services.error_mapper import MSG_CONNECTION, MSG_SERVER
from services.exceptions import ApiException, NetworkException
from services.wizard.resolution_dispatcher import ImmediateDispatcher, QThreadDispatcher
from ui.wizards.create_document import (
    STEP_CIRCUIT,
    STEP_CONTENT,
    STEP_CUSTOMER_VENDOR,
    STEP_DATE,
    STEP_RESPONSIBILITY_CENTRE,
    STEP_REVIEW,
    STEP_TYPE,
)
from ui.wizards.framework import WizardStatus


@pytest.fixture
def make_controller(qapp, services, resolver, profile_with_centre):
    def _make(profile=profile_with_centre, dispatcher=None, start=True):
        controller = DocumentWizardController(
            services,
            user_profile=profile,
            resolver=resolver,
            dispatcher=dispatcher or ImmediateDispatcher(),
            doc_date="2024-03-15",
        )
        if start:
            controller.start()
        return controller
    return _make


@pytest.fixture
def controller(make_controller):
    return make_controller()


def _walk_to_type(controller):
    assert controller.advance().success
    assert controller.advance().success
    assert controller.current_step == STEP_TYPE


def _walk_to_review(controller, content="Quarterly report\nFigures for Q1"):
    _walk_to_type(controller)
    controller.update_field("selected_type_id", 1)
    assert controller.advance().success
    assert controller.advance().success
    controller.update_field("content", content)
    assert controller.advance().success
    assert controller.advance().success
    assert controller.current_step == STEP_REVIEW


class TestInitialState:

    def test_starts_on_first_step_with_profile_centre(self, controller):
        assert controller.current_step == STEP_RESPONSIBILITY_CENTRE
        assert controller.form.responsibility_centre_id == 1
        assert controller.form.responsibility_centre_locked is True
        assert controller.form.doc_date == date(2024, 3, 15)

    def test_types_filtered_by_date(self, controller):
        assert [t.id for t in controller.options.types_for_date] == [1, 2, 3]

    def test_locked_centre_skips_catalogue(self, controller, services):
        assert services.responsibility_centres.calls == []
        assert controller.required_fields(STEP_RESPONSIBILITY_CENTRE) == []

    def test_locked_centre_cannot_be_changed(self, controller):
        result = controller.update_field("responsibility_centre_id", 2)
        assert not result.success
        assert controller.form.responsibility_centre_id == 1

    def test_unknown_field_is_rejected(self, controller):
        result = controller.update_field("colour", "red")
        assert not result.success
        assert "colour" in result.field_errors


class TestResponsibilityCentre:

    def test_user_without_centre_must_choose_one(self, make_controller, profile_without_centre):
        controller = make_controller(profile=profile_without_centre)

        assert [c.id for c in controller.options.responsibility_centres] == [1, 2]
        result = controller.advance()
        assert not result.success
        assert "responsibility_centre_id" in result.field_errors

        assert controller.update_field("responsibility_centre_id", 2).success
        assert "responsibility_centre_id" not in controller.form.field_errors
        assert controller.advance().success
        assert controller.current_step == STEP_DATE

    def test_catalogue_failure_is_retryable(self, make_controller, profile_without_centre, services):
        services.responsibility_centres.error = NetworkException(
            "refused", original_error=ConnectionError("refused"))
        controller = make_controller(profile=profile_without_centre)

        assert controller.options.errors["responsibility_centres"] == MSG_CONNECTION
        result = controller.advance()
        assert not result.success
        assert "Retry" in result.message

        services.responsibility_centres.error = None
        assert controller.retry_resolution("responsibility_centres").success
        assert "responsibility_centres" not in controller.options.errors
        assert len(controller.options.responsibility_centres) == 2


class TestDateCascade:

    def test_date_change_clears_type_series_and_circuit(self, controller, services):
        controller.update_field("selected_type_id", 1)
        controller.update_field("circuit_id", 1)
        assert controller.form.selected_sub_type_id == 11

        controller.update_field("doc_date", "2024-06-01")

        assert controller.form.selected_type_id is None
        assert controller.form.selected_sub_type_id is None
        assert controller.form.circuit_id is None
        assert controller.form.circuit_name == ""
        assert controller.options.subtypes is None
        assert (1, "2024-06-01") in services.series.calls

    def test_cascade_emits_invalidated_fields(self, controller, qtbot):
        controller.update_field("selected_type_id", 1)
        with qtbot.waitSignal(controller.fields_invalidated) as blocker:
            controller.update_field("doc_date", date(2024, 6, 1))
        assert "selected_type_id" in blocker.args[0]
        assert "selected_sub_type_id" in blocker.args[0]

    def test_same_value_does_not_cascade(self, controller):
        controller.update_field("selected_type_id", 1)
        controller.update_field("doc_date", "2024-03-15")
        assert controller.form.selected_type_id == 1
        assert controller.form.selected_sub_type_id == 11

    def test_invalid_date_is_kept_for_the_date_step(self, controller):
        controller.advance()
        controller.update_field("doc_date", "2024-02-30")

        result = controller.advance()

        assert not result.success
        assert "doc_date" in result.field_errors
        assert controller.options.types_for_date is None

    def test_type_without_series_on_date_is_rejected(self, controller):
        result = controller.update_field("selected_type_id", 4)
        assert not result.success
        assert controller.form.selected_type_id is None


class TestSeriesResolution:

    def test_single_series_is_auto_selected(self, controller):
        _walk_to_type(controller)
        controller.update_field("selected_type_id", 1)

        assert controller.form.selected_sub_type_id == 11
        assert "subtypes" in controller.options.infos
        assert controller.advance().success
        assert controller.current_step == STEP_CUSTOMER_VENDOR

    def test_several_series_require_a_choice(self, controller):
        _walk_to_type(controller)
        controller.update_field("selected_type_id", 2)

        assert controller.form.selected_sub_type_id is None
        assert not controller.advance().success
        assert not controller.update_field("selected_sub_type_id", 12).success
        assert controller.update_field("selected_sub_type_id", 22).success
        assert controller.advance().success

    def test_no_valid_series_blocks_the_type_step(self, make_controller, manual_dispatcher):
        controller = make_controller(dispatcher=manual_dispatcher)
        manual_dispatcher.run(0)
        # types_for_date still pending, so the type is not yet filtered out
        assert controller.update_field("selected_type_id", 4).success
        manual_dispatcher.run_all()

        assert controller.options.subtypes == []
        assert "No valid series" in controller.options.warnings["subtypes"]
        _walk_to_type(controller)
        result = controller.advance()
        assert not result.success
        assert controller.form.selected_sub_type_id is None

    def test_transport_error_uses_fallback_series(self, make_controller, services):
        services.series.error = NetworkException("Connection refused")
        controller = make_controller()

        assert controller.options.types_for_date is None
        assert "types_for_date" in controller.options.errors

        assert controller.update_field("selected_type_id", 1).success
        assert [s.id for s in controller.options.subtypes] == [101, 102]
        assert "subtypes" in controller.options.fallback_channels
        assert controller.update_field("selected_sub_type_id", 101).success

        _walk_to_type(controller)
        assert controller.advance().success


class TestLastRequestWins:

    def test_stale_series_result_is_dropped(self, make_controller, manual_dispatcher):
        controller = make_controller(dispatcher=manual_dispatcher)
        manual_dispatcher.run_all()

        controller.update_field("selected_type_id", 1)
        controller.update_field("selected_type_id", 2)
        # queue: subtypes(1), circuits(1), customers, subtypes(2), circuits(2)
        manual_dispatcher.run(3)
        manual_dispatcher.run_all()

        assert {s.id for s in controller.options.subtypes} == {21, 22}
        assert controller.form.selected_sub_type_id is None
        assert [c.id for c in controller.options.circuits] == [2, 4]

    def test_date_change_invalidates_in_flight_series(self, make_controller, manual_dispatcher):
        controller = make_controller(dispatcher=manual_dispatcher)
        manual_dispatcher.run_all()

        controller.update_field("selected_type_id", 1)
        controller.update_field("doc_date", "2024-06-01")
        manual_dispatcher.run_all()

        assert controller.form.selected_type_id is None
        assert controller.form.selected_sub_type_id is None
        assert controller.options.subtypes is None
        assert [t.id for t in controller.options.types_for_date] == [1, 2, 3]

    def test_loading_step_cannot_advance(self, make_controller, manual_dispatcher):
        controller = make_controller(dispatcher=manual_dispatcher)
        manual_dispatcher.run_all()
        _walk_to_type(controller)

        controller.update_field("selected_type_id", 1)
        assert controller.is_step_loading(STEP_TYPE)
        result = controller.advance()
        assert not result.success
        assert "loading" in result.message

        manual_dispatcher.run_all()
        assert not controller.is_step_loading(STEP_TYPE)
        assert controller.advance().success


class TestCustomerVendor:

    def test_tier_none_passes_through(self, controller):
        _walk_to_type(controller)
        controller.update_field("selected_type_id", 1)
        controller.advance()

        assert not controller.is_step_applicable(STEP_CUSTOMER_VENDOR)
        assert controller.advance().success
        assert controller.current_step == STEP_CONTENT

    def test_customer_selection_and_overrides(self, controller, customers, services):
        _walk_to_type(controller)
        controller.update_field("selected_type_id", 2)
        controller.update_field("selected_sub_type_id", 22)
        assert controller.advance().success

        assert controller.options.customer_vendors == customers
        result = controller.advance()
        assert not result.success
        assert "selected_customer_vendor" in result.field_errors

        controller.update_field("selected_customer_vendor", customers[0])
        assert controller.form.customer_vendor_name == "Acme Corp"
        controller.update_field("customer_vendor_name", "Acme Billing")
        assert customers[0].name == "Acme Corp"
        assert controller.advance().success

        controller.update_field("content", "Order 42")
        controller.advance()
        controller.advance()
        assert controller.submit().success

        payload = services.documents.payloads[0]
        assert payload["customerVendorCode"] == "C001"
        assert payload["customerVendorName"] == "Acme Billing"
        assert payload["customerVendorCity"] == "Lyon"

    def test_tier_change_clears_entity(self, controller, customers, vendors):
        controller.update_field("selected_type_id", 2)
        controller.update_field("selected_customer_vendor", customers[1])

        controller.update_field("selected_type_id", 3)

        assert controller.form.selected_customer_vendor is None
        assert controller.form.customer_vendor_name == ""
        assert controller.options.customer_vendors == vendors

    def test_type_rejected_until_catalogue_loads(self, make_controller, manual_dispatcher, customers):
        controller = make_controller(dispatcher=manual_dispatcher)

        result = controller.update_field("selected_type_id", 2)
        assert not result.success
        assert controller.form.selected_type_id is None

        manual_dispatcher.run_all()
        assert controller.update_field("selected_type_id", 2).success
        assert controller.is_step_loading(STEP_CUSTOMER_VENDOR)
        manual_dispatcher.run_all()

        assert controller.options.customer_vendors == customers
        assert not controller.is_step_loading(STEP_CUSTOMER_VENDOR)

    def test_search_uses_tier_code(self, controller):
        controller.update_field("selected_type_id", 3)
        assert [e.name for e in controller.search_customer_vendors("v001")] == ["Globex"]


class TestCircuit:

    def test_circuit_name_follows_selection(self, controller):
        controller.update_field("selected_type_id", 1)

        assert controller.update_field("circuit_id", 1).success
        assert controller.form.circuit_name == "Invoice approval"

        assert controller.update_field("circuit_id", None).success
        assert controller.form.circuit_name == ""

    def test_ineligible_circuit_is_rejected(self, controller):
        controller.update_field("selected_type_id", 1)
        controller.update_field("circuit_id", 1)

        assert not controller.update_field("circuit_id", 4).success
        assert not controller.update_field("circuit_name", "Anything").success
        assert controller.form.circuit_id == 1

    def test_type_change_clears_circuit(self, controller):
        controller.update_field("selected_type_id", 1)
        controller.update_field("circuit_id", 1)

        controller.update_field("selected_type_id", 2)

        assert controller.form.circuit_id is None
        assert controller.form.circuit_name == ""
        assert [c.id for c in controller.search_circuits("order")] == [4]


class TestContent:

    @pytest.mark.parametrize("raw, expected", [
        ("false", False), ("0", False), ("", False), ("True", True), ("yes", True), (1, True),
    ])
    def test_is_external_parses_widget_strings(self, controller, raw, expected):
        controller.update_field("is_external", raw)
        assert controller.form.is_external is expected

    def test_title_derived_from_content(self, controller):
        _walk_to_review(controller, content="  Quarterly report  \nFigures")
        assert controller.form.title == "Quarterly report"

    def test_external_reference_required(self, controller, services):
        _walk_to_type(controller)
        controller.update_field("selected_type_id", 1)
        controller.advance()
        controller.advance()
        controller.update_field("content", "Scanned letter")
        controller.update_field("is_external", True)

        result = controller.advance()
        assert not result.success
        assert "external_reference" in controller.form.field_errors

        controller.update_field("external_reference", "EXT-1")
        assert "external_reference" not in controller.form.field_errors
        controller.advance()
        controller.advance()
        assert controller.submit().success

        payload = services.documents.payloads[0]
        assert payload["documentAlias"] == ""
        assert payload["documentExterne"] == "EXT-1"


class TestNavigation:

    def test_retreat_is_clamped(self, controller):
        result = controller.retreat()
        assert result.success
        assert controller.current_step == STEP_RESPONSIBILITY_CENTRE

    def test_advance_is_clamped_to_review(self, controller):
        _walk_to_review(controller)
        assert controller.advance().success
        assert controller.current_step == STEP_REVIEW

    def test_jump_back_and_return_to_review(self, controller):
        _walk_to_review(controller)

        assert controller.jump_to(STEP_CONTENT).success
        controller.update_field("content", "Edited")
        assert controller.advance().success
        assert controller.advance().success
        assert controller.current_step == STEP_REVIEW
        assert controller.form.content == "Edited"

    def test_jump_only_from_review(self, controller):
        assert not controller.jump_to(STEP_CIRCUIT).success
        _walk_to_type(controller)

        result = controller.jump_to(STEP_DATE)

        assert not result.success
        assert "Review" in result.message
        assert controller.current_step == STEP_TYPE

    def test_review_summary(self, controller):
        _walk_to_review(controller)
        summary = controller.review_summary()

        assert summary["responsibility_centre"] == "Finance"
        assert summary["document_type"] == "Invoice (INV)"
        assert summary["subtype"] == "SI - SI series"
        assert summary["doc_date"] == "2024-03-15"
        assert summary["circuit"] == STATIC_DOCUMENT_LABEL
        assert summary["customer_vendor"] is None


class TestSubmission:

    def test_submit_only_from_review(self, controller):
        result = controller.submit()
        assert not result.success
        assert controller.form.status == WizardStatus.OPEN

    def test_successful_submit_closes_wizard(self, controller, qtbot):
        _walk_to_review(controller)

        with qtbot.waitSignal(controller.submission_succeeded) as blocker:
            result = controller.submit()

        assert result.success
        assert blocker.args[0] == {"id": 501, "title": "Quarterly report"}
        assert controller.form.status == WizardStatus.COMPLETED
        assert controller.is_closed
        assert controller.form.content == ""
        assert not controller.update_field("content", "late edit").success

    def test_failed_submit_keeps_data_for_retry(self, controller, services):
        _walk_to_review(controller)
        services.documents.error = ApiException("500", status_code=500)

        result = controller.submit()

        assert not result.success
        assert controller.submission_error == MSG_SERVER
        assert controller.current_step == STEP_REVIEW
        assert controller.form.content == "Quarterly report\nFigures for Q1"
        assert controller.form.status == WizardStatus.OPEN

        services.documents.error = None
        assert controller.submit().success
        assert controller.form.created_document["id"] == 501

    def test_double_submit_is_ignored(self, make_controller, manual_dispatcher, services):
        controller = make_controller(dispatcher=manual_dispatcher)
        manual_dispatcher.run_all()
        assert controller.advance().success
        assert controller.advance().success
        controller.update_field("selected_type_id", 1)
        manual_dispatcher.run_all()
        assert controller.advance().success
        assert controller.advance().success
        controller.update_field("content", "Quarterly report")
        assert controller.advance().success
        assert controller.advance().success

        assert controller.submit().message == "Submitting document..."
        assert controller.is_submitting
        assert not controller.submit().success

        manual_dispatcher.run_all()
        assert len(services.documents.payloads) == 1
        assert controller.form.status == WizardStatus.COMPLETED


class TestCancel:

    def test_cancel_discards_state(self, controller, qtbot):
        controller.update_field("selected_type_id", 1)

        with qtbot.waitSignal(controller.wizard_closed) as blocker:
            assert controller.cancel().success

        assert blocker.args == [WizardStatus.CANCELLED]
        assert controller.form.selected_type_id is None
        assert not controller.advance().success
        assert not controller.cancel().success


def test_background_resolution_end_to_end(make_controller, qtbot):
    dispatcher = QThreadDispatcher()
    controller = make_controller(dispatcher=dispatcher)

    qtbot.waitUntil(lambda: controller.options.types_for_date is not None, timeout=5000)
    controller.update_field("selected_type_id", 1)
    qtbot.waitUntil(lambda: controller.form.selected_sub_type_id == 11, timeout=5000)

    qtbot.waitUntil(lambda: not controller.is_loading, timeout=5000)

    assert [c.id for c in controller.options.circuits] == [1, 2]
    assert dispatcher.active_count == 0
    dispatcher.shutdown()
