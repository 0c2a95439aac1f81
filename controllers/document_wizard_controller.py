# -*- coding: utf-8 -*-
"""
Document Wizard Controller
==========================
Owns the FormState and the step pointer of one create-document session.

Every mutation goes through update_field(), which applies the declared
invalidation cascade and schedules the resolutions the new value needs.
Resolutions run on a ResolutionDispatcher; results are applied only while
their ticket is still the newest of its channel.

Usage:
    controller = build_document_wizard(user_profile)
    controller.update_field("doc_date", "2024-03-15")
    controller.update_field("selected_type_id", 1)
    result = controller.advance()
    if not result.success:
        show_errors(result.field_errors)
"""

from typing import Any, Callable, Dict, List, Optional

from PyQt5.QtCore import pyqtSignal

from app.config import Config
from controllers.base_controller import BaseController, OperationResult
from models import Circuit, CustomerVendor, TierType, UserProfile
from services.constraint_resolver import (
    ConstraintResolver,
    ResolutionResult,
    search_circuits,
    search_customer_vendors,
)
from services.document_api_service import WizardServices
from services.error_mapper import map_exception
from services.exceptions import AssemblyException
from services.fallback_data_provider import FallbackDataProvider
from services.wizard.request_assembler import RequestAssembler
from services.wizard.resolution_dispatcher import (
    RequestTracker,
    ResolutionDispatcher,
    ResolutionTicket,
    create_dispatcher,
)
from services.wizard.step_validator import StepValidator
from ui.wizards.create_document.document_context import (
    FIELD_DEFAULTS,
    DocumentFormState,
    ResolvedOptions,
    dependents_of,
)
from ui.wizards.create_document.steps import (
    CHANNEL_STEPS,
    DOCUMENT_WIZARD_STEPS,
    ResolutionChannel,
    STEP_REVIEW,
    channels_of,
)
from ui.wizards.framework.step_definition import StepDefinition, StepValidationResult
from ui.wizards.framework.step_navigator import StepNavigator
from ui.wizards.framework.wizard_context import WizardStatus
from utils.datetime_utils import parse_date, to_date_isoformat
from utils.logger import get_logger

logger = get_logger(__name__)

STATIC_DOCUMENT_LABEL = "Static document (no circuit)"

# Fields filled by the controller, never edited directly
_DERIVED_FIELDS = ("circuit_name",)


class DocumentWizardController(BaseController):
    """
    Controller for the create-document wizard.

    Provides:
    - Field updates with invalidation cascades
    - Validated step navigation
    - Last-request-wins option resolution
    - Submission with double-submit guard
    """

    # Signals
    field_changed = pyqtSignal(str, object)  # field name, new value
    fields_invalidated = pyqtSignal(list)  # cleared field names
    step_changed = pyqtSignal(int, int)  # old step id, new step id
    validation_failed = pyqtSignal(dict)  # field -> message
    options_changed = pyqtSignal(str)  # channel
    resolution_failed = pyqtSignal(str, str)  # channel, message
    step_loading_changed = pyqtSignal(int, bool)  # step id, loading
    submission_succeeded = pyqtSignal(dict)  # created document
    submission_failed = pyqtSignal(str)  # message
    wizard_closed = pyqtSignal(str)  # final status

    def __init__(
        self,
        services: WizardServices,
        user_profile: Optional[UserProfile] = None,
        resolver: Optional[ConstraintResolver] = None,
        dispatcher: Optional[ResolutionDispatcher] = None,
        assembler: Optional[RequestAssembler] = None,
        doc_date: Any = None,
        parent=None
    ):
        super().__init__(parent)
        self.services = services
        self.user_profile = user_profile or UserProfile()
        if resolver is None:
            fallback = FallbackDataProvider() if Config.SUBTYPE_FALLBACK_ENABLED else None
            resolver = ConstraintResolver(services, fallback)
        self.resolver = resolver
        self.dispatcher = dispatcher or create_dispatcher(Config.RESOLUTION_MODE)
        self.assembler = assembler or RequestAssembler()
        self.tracker = RequestTracker()

        self.form = DocumentFormState(self.user_profile, doc_date=doc_date)
        self.options = ResolvedOptions()
        self._customer_vendor_tier = TierType.NONE

        self.navigator = StepNavigator(self.form, DOCUMENT_WIZARD_STEPS, self._validate_step)
        self.navigator.step_changed.connect(self.step_changed.emit)

        self._requesters: Dict[str, Callable[[], bool]] = {
            ResolutionChannel.DOCUMENT_TYPES: self._request_document_types,
            ResolutionChannel.TYPES_FOR_DATE: self._request_types_for_date,
            ResolutionChannel.SUBTYPES: self._request_subtypes,
            ResolutionChannel.CIRCUITS: self._request_circuits,
            ResolutionChannel.RESPONSIBILITY_CENTRES: self._request_responsibility_centres,
            ResolutionChannel.CUSTOMER_VENDORS: self._request_customer_vendors,
        }

        logger.info(
            f"Document wizard {self.form.reference_number} opened "
            f"(centre locked={self.form.responsibility_centre_locked})"
        )

    # ==================== Properties ====================

    @property
    def current_step(self) -> int:
        """1-based id of the current step."""
        return self.navigator.current_step_id

    @property
    def steps(self) -> List[StepDefinition]:
        return list(self.navigator.steps)

    @property
    def is_closed(self) -> bool:
        return self.form.is_closed

    @property
    def is_submitting(self) -> bool:
        return self.tracker.is_pending(ResolutionChannel.SUBMIT)

    @property
    def submission_error(self) -> Optional[str]:
        return self.form.submission_error

    def snapshot(self) -> Dict[str, Any]:
        """Read-only copy of the form values."""
        return self.form.snapshot()

    def is_step_applicable(self, step_id: int) -> bool:
        step = self.navigator.get_step(step_id)
        return step is not None and step.is_applicable(self.form, self.options)

    def required_fields(self, step_id: int) -> List[str]:
        step = self.navigator.get_step(step_id)
        return step.required_fields_for(self.form, self.options) if step else []

    def is_step_loading(self, step_id: int) -> bool:
        """True while a resolution owned by the step is in flight."""
        return any(self.tracker.is_pending(channel) for channel in channels_of(step_id))

    # ==================== Lifecycle ====================

    def start(self) -> OperationResult:
        """Kick off the resolutions the first steps need."""
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")

        self._log_operation("start", reference=self.form.reference_number)
        self._request_document_types()
        self._request_responsibility_centres()
        return OperationResult.ok(data=self.current_step)

    def cancel(self) -> OperationResult:
        """Discard the FormState and close the wizard."""
        if self.is_closed:
            return OperationResult.fail("The wizard is already closed.")
        logger.info(f"Document wizard {self.form.reference_number} cancelled")
        self._close(WizardStatus.CANCELLED)
        return OperationResult.ok()

    def _close(self, status: str):
        for channel in list(self.tracker.pending_channels()):
            self.tracker.invalidate(channel)
        self.form.clear_fields()
        self.form.status = status
        self.options = ResolvedOptions()
        self._set_loading(False)
        self.wizard_closed.emit(status)

    # ==================== Field updates ====================

    def update_field(self, name: str, value: Any) -> OperationResult:
        """
        Apply a field change, clear its validation error and run the
        invalidation cascade.
        """
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")
        if name not in FIELD_DEFAULTS or name in _DERIVED_FIELDS:
            return OperationResult.fail(f"Unknown or read-only field: {name}", field_errors={name: "Not editable"})

        try:
            value = self._coerce(name, value)
        except (TypeError, ValueError) as e:
            message = f"Invalid value for {name}: {e}"
            self.form.field_errors[name] = message
            return OperationResult.fail(message, field_errors={name: message})

        rejection = self._check_allowed(name, value)
        if rejection:
            return OperationResult.fail(rejection, field_errors={name: rejection})

        old_value = self.form.get_field(name)
        self.form.clear_error(name)
        previous_type_id = self.form.selected_type_id

        if name == "selected_customer_vendor":
            self.form.seed_customer_vendor(value)
            self.field_changed.emit(name, value)
            return OperationResult.ok(data=value)

        self.form.set_field(name, value)
        if name == "circuit_id":
            circuit = self.options.circuit(value)
            self.form.circuit_name = circuit.title if circuit else ""
            self.field_changed.emit(name, value)
            self.field_changed.emit("circuit_name", self.form.circuit_name)
            return OperationResult.ok(data=value)

        self.field_changed.emit(name, value)
        if old_value == value:
            return OperationResult.ok(data=value)

        cleared = self._apply_cascade(name)
        if name == "doc_date":
            self._on_date_changed()
        if name == "selected_type_id" or "selected_type_id" in cleared:
            self._on_type_changed(previous_type_id)

        return OperationResult.ok(data=value, warnings=self._current_warnings())

    def _coerce(self, name: str, value: Any) -> Any:
        if name in ("responsibility_centre_id", "selected_type_id", "selected_sub_type_id", "circuit_id"):
            if value is None or value == "":
                return None
            return int(value)
        if name in ("doc_date", "comptable_date"):
            if value is None or (isinstance(value, str) and not value.strip()):
                return None
            # Unparseable input is kept so the Date step can report it
            return parse_date(value) or value
        if name == "is_external":
            if isinstance(value, str):
                return value.strip().lower() in ("true", "1", "yes")
            return bool(value)
        if name == "selected_customer_vendor":
            if value is None or isinstance(value, CustomerVendor):
                return value
            if isinstance(value, dict):
                return CustomerVendor.from_dict(value)
            raise TypeError("expected a CustomerVendor")
        return "" if value is None else str(value)

    def _check_allowed(self, name: str, value: Any) -> Optional[str]:
        """Return a rejection message, or None if the update may be applied."""
        if name == "responsibility_centre_id" and self.form.responsibility_centre_locked:
            if value != self.form.responsibility_centre_id:
                return "The responsibility centre is set from your profile and cannot be changed."

        if name == "selected_type_id" and value is not None:
            if self.tracker.is_pending(ResolutionChannel.DOCUMENT_TYPES):
                return "Document types are still loading."
            if self.options.document_type(value) is None:
                return "Unknown document type."
            valid_types = self.options.types_for_date
            if valid_types is not None and value not in [t.id for t in valid_types]:
                return "This document type has no active series on the document date."

        if name == "selected_sub_type_id" and value is not None:
            if self.options.subtypes is not None and self.options.subtype(value) is None:
                return "This series is not valid for the selected type and date."

        if name == "circuit_id" and value is not None:
            if self.options.circuit(value) is None:
                return "This circuit is not available for the selected document type."

        return None

    def _apply_cascade(self, name: str) -> List[str]:
        cleared = dependents_of(name)
        if not cleared:
            return cleared
        for dependent in cleared:
            self.form.reset_field(dependent)
            self.form.clear_error(dependent)
        logger.debug(f"{name} changed, cleared {cleared}")
        self.fields_invalidated.emit(cleared)
        return cleared

    def _on_date_changed(self):
        self.options.types_for_date = None
        self.options.clear_channel(ResolutionChannel.TYPES_FOR_DATE)
        if not self._request_types_for_date():
            self.tracker.invalidate(ResolutionChannel.TYPES_FOR_DATE)
            self._update_loading(ResolutionChannel.TYPES_FOR_DATE)

    def _on_type_changed(self, previous_type_id: Optional[int]):
        for channel in (ResolutionChannel.SUBTYPES, ResolutionChannel.CIRCUITS):
            self.tracker.invalidate(channel)
            self.options.clear_channel(channel)
            self._update_loading(channel)
        self.options.subtypes = None
        self.options.circuits = None

        type_id = self.form.selected_type_id
        logger.info(f"Document type changed: {previous_type_id} → {type_id}")
        if type_id is None:
            return

        self._sync_customer_vendor_tier()
        self._request_subtypes()
        self._request_circuits()

    def _sync_customer_vendor_tier(self):
        """Reset the entity and its catalogue when the type's tier changes."""
        new_tier = self.options.tier_type_for(self.form.selected_type_id)
        if new_tier == self._customer_vendor_tier:
            return

        logger.info(f"Tier type changed: {self._customer_vendor_tier.label} → {new_tier.label}")
        self._customer_vendor_tier = new_tier
        if self.form.selected_customer_vendor is not None:
            self.form.seed_customer_vendor(None)
            cleared = ["selected_customer_vendor"] + dependents_of("selected_customer_vendor")
            for name in cleared:
                self.form.clear_error(name)
            self.fields_invalidated.emit(cleared)

        self.tracker.invalidate(ResolutionChannel.CUSTOMER_VENDORS)
        self.options.customer_vendors = None
        self.options.clear_channel(ResolutionChannel.CUSTOMER_VENDORS)
        self._update_loading(ResolutionChannel.CUSTOMER_VENDORS)
        self._request_customer_vendors()

    # ==================== Navigation ====================

    def _validate_step(self, step: StepDefinition) -> StepValidationResult:
        return StepValidator.validate_step(step.id, self.form, self.options)

    def advance(self) -> OperationResult:
        """Validate the current step and move to the next one (clamped to Review)."""
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")

        step_id = self.current_step
        if self.is_step_loading(step_id):
            message = "Options for this step are still loading."
            logger.info(f"Advance from step {step_id} blocked: still loading")
            return OperationResult.fail(message)

        result = self.navigator.next_step()
        if not result.is_valid:
            self.form.field_errors.update(result.field_errors)
            self.validation_failed.emit(dict(result.field_errors))
            return OperationResult.fail(result.errors[0], errors=result.errors, field_errors=result.field_errors)

        self._apply_derived(result)
        message = " ".join(result.infos)
        return OperationResult.ok(data=self.current_step, message=message, warnings=result.warnings)

    def retreat(self) -> OperationResult:
        """Move one step back (clamped to the first step). Never validates."""
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")
        self.navigator.previous_step()
        return OperationResult.ok(data=self.current_step)

    def jump_to(self, step_id: int) -> OperationResult:
        """Edit a previously visited step from Review, without sequential validation."""
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")
        if self.current_step != STEP_REVIEW:
            return OperationResult.fail("Steps can only be reopened from the Review step.")
        if not self.navigator.goto_step(step_id):
            return OperationResult.fail(f"Step {step_id} cannot be opened from here.")
        return OperationResult.ok(data=self.current_step)

    def _apply_derived(self, result: StepValidationResult):
        for name, value in result.derived_values.items():
            self.form.set_field(name, value)
            self.field_changed.emit(name, value)
            logger.debug(f"Derived {name} = {value!r}")

    # ==================== Submission ====================

    def submit(self) -> OperationResult:
        """
        Validate everything, assemble the creation request and send it.

        With a background dispatcher the outcome arrives later through
        submission_succeeded / submission_failed.
        """
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")
        if self.is_submitting:
            return OperationResult.fail("A submission is already in progress.")
        if self.current_step != STEP_REVIEW:
            return OperationResult.fail("Documents can only be submitted from the Review step.")

        pending = [c for c in self.tracker.pending_channels() if c != ResolutionChannel.SUBMIT]
        if pending:
            return OperationResult.fail("Some options are still loading. Please wait.")

        validation = StepValidator.validate_all(self.form, self.options)
        if not validation.is_valid:
            self.form.field_errors.update(validation.field_errors)
            self.validation_failed.emit(dict(validation.field_errors))
            logger.warning(f"Submission blocked by validation: {validation.errors}")
            return OperationResult.fail(validation.errors[0], errors=validation.errors,
                                        field_errors=validation.field_errors)
        self._apply_derived(validation)

        try:
            payload = self.assembler.assemble(self.form, self.options)
        except AssemblyException as e:
            logger.error(f"Cannot assemble create request: {e}")
            return OperationResult.fail(e.message, field_errors=e.errors)

        self.form.status = WizardStatus.SUBMITTING
        self.form.submission_error = None
        self._emit_started("submit")

        ticket = self.tracker.issue(ResolutionChannel.SUBMIT, self.form.reference_number)
        self._update_loading(ResolutionChannel.SUBMIT)
        logger.info(f"Submitting document {self.form.reference_number}")
        self.dispatcher.dispatch(
            lambda: self.services.documents.create(payload),
            lambda created: self._on_submit_succeeded(ticket, created),
            lambda error: self._on_submit_failed(ticket, error),
        )

        if self.form.status == WizardStatus.COMPLETED:
            return OperationResult.ok(data=self.form.created_document, message="Document created.")
        if self.form.submission_error:
            return OperationResult.fail(self.form.submission_error)
        return OperationResult.ok(data=payload, message="Submitting document...")

    def _on_submit_succeeded(self, ticket: ResolutionTicket, created):
        if not self.tracker.complete(ticket):
            return
        created = created if isinstance(created, dict) else {"result": created}
        logger.info(f"Document {self.form.reference_number} created: id={created.get('id')}")
        self.form.created_document = created
        self._emit_completed("submit", True)
        self.submission_succeeded.emit(created)
        self._close(WizardStatus.COMPLETED)

    def _on_submit_failed(self, ticket: ResolutionTicket, error: Exception):
        if not self.tracker.complete(ticket):
            return
        message = map_exception(error)
        logger.error(f"Document {self.form.reference_number} creation failed: {error}")
        self.form.status = WizardStatus.OPEN
        self.form.submission_error = message
        self._emit_error("submit", message)
        self._emit_completed("submit", False)
        self._update_loading(ResolutionChannel.SUBMIT)
        self.submission_failed.emit(message)

    # ==================== Resolution ====================

    def retry_resolution(self, channel: str) -> OperationResult:
        """Re-issue the resolution of a channel for the current FormState."""
        if self.is_closed:
            return OperationResult.fail("The wizard is closed.")
        requester = self._requesters.get(channel)
        if requester is None:
            return OperationResult.fail(f"Unknown resolution channel: {channel}")
        if not requester():
            return OperationResult.fail(f"Nothing to resolve for {channel} with the current selections.")
        return OperationResult.ok(data=channel)

    def _resolve(self, channel: str, key, job: Callable[[], ResolutionResult],
                 apply: Callable[[ResolutionResult], None]):
        ticket = self.tracker.issue(channel, key)
        self.options.errors.pop(channel, None)
        self._update_loading(channel)
        logger.debug(f"Dispatching {channel} resolution for {key!r}")
        self.dispatcher.dispatch(
            job,
            lambda result: self._on_resolved(ticket, result, apply),
            lambda error: self._on_resolution_failed(ticket, error),
        )

    def _on_resolved(self, ticket: ResolutionTicket, result: ResolutionResult,
                     apply: Callable[[ResolutionResult], None]):
        if self.is_closed or not self.tracker.complete(ticket):
            return
        channel = ticket.channel
        self.options.clear_channel(channel)
        if result.warning:
            self.options.warnings[channel] = result.warning
        if result.used_fallback:
            self.options.fallback_channels.add(channel)
        apply(result)
        self._update_loading(channel)
        self.options_changed.emit(channel)

    def _on_resolution_failed(self, ticket: ResolutionTicket, error: Exception):
        if self.is_closed or not self.tracker.complete(ticket):
            return
        message = map_exception(error)
        logger.error(f"{ticket.channel} resolution failed for {ticket.key!r}: {error}")
        self.options.errors[ticket.channel] = message
        self._update_loading(ticket.channel)
        self.resolution_failed.emit(ticket.channel, message)

    def _update_loading(self, channel: str):
        step_id = CHANNEL_STEPS.get(channel)
        if step_id is not None:
            self.step_loading_changed.emit(step_id, self.is_step_loading(step_id))
        self._set_loading(bool(self.tracker.pending_channels()))

    # ---- requesters: return False when the current FormState needs no request ----

    def _request_document_types(self) -> bool:
        self._resolve(ResolutionChannel.DOCUMENT_TYPES, None,
                      self.resolver.resolve_document_types, self._apply_document_types)
        return True

    def _apply_document_types(self, result: ResolutionResult):
        self.options.document_types = result.options
        self._request_types_for_date()

    def _request_types_for_date(self) -> bool:
        day = parse_date(self.form.doc_date)
        if day is None or not self.options.document_types:
            return False
        types = list(self.options.document_types)
        self._resolve(ResolutionChannel.TYPES_FOR_DATE, day.isoformat(),
                      lambda: self.resolver.resolve_types_for_date(types, day),
                      self._apply_types_for_date)
        return True

    def _apply_types_for_date(self, result: ResolutionResult):
        self.options.types_for_date = result.options

    def _request_subtypes(self) -> bool:
        type_id = self.form.selected_type_id
        day = parse_date(self.form.doc_date)
        if type_id is None or day is None:
            return False
        self._resolve(ResolutionChannel.SUBTYPES, (type_id, day.isoformat()),
                      lambda: self.resolver.resolve_subtypes(type_id, day),
                      self._apply_subtypes)
        return True

    def _apply_subtypes(self, result: ResolutionResult):
        self.options.subtypes = result.options
        auto = result.auto_selected
        if auto is not None and self.form.selected_sub_type_id is None:
            self.form.set_field("selected_sub_type_id", auto.id)
            self.form.clear_error("selected_sub_type_id")
            self.options.infos[ResolutionChannel.SUBTYPES] = (
                f"Series {auto.display_name} was selected automatically: it is the only series "
                f"valid on {to_date_isoformat(self.form.doc_date)}."
            )
            self.field_changed.emit("selected_sub_type_id", auto.id)

    def _request_circuits(self) -> bool:
        type_id = self.form.selected_type_id
        if type_id is None:
            return False
        self._resolve(ResolutionChannel.CIRCUITS, type_id,
                      lambda: self.resolver.resolve_circuits(type_id),
                      self._apply_circuits)
        return True

    def _apply_circuits(self, result: ResolutionResult):
        self.options.circuits = result.options
        if self.form.circuit_id is not None and self.options.circuit(self.form.circuit_id) is None:
            self.form.reset_field("circuit_id")
            self.form.reset_field("circuit_name")
            self.fields_invalidated.emit(["circuit_id", "circuit_name"])

    def _request_responsibility_centres(self) -> bool:
        if self.form.responsibility_centre_locked:
            return False
        self._resolve(ResolutionChannel.RESPONSIBILITY_CENTRES, None,
                      self.resolver.resolve_responsibility_centres,
                      self._apply_responsibility_centres)
        return True

    def _apply_responsibility_centres(self, result: ResolutionResult):
        self.options.responsibility_centres = result.options

    def _request_customer_vendors(self) -> bool:
        tier_type = self.options.tier_type_for(self.form.selected_type_id)
        if not tier_type.requires_customer_vendor:
            return False
        self._resolve(ResolutionChannel.CUSTOMER_VENDORS, tier_type,
                      lambda: self.resolver.resolve_customer_vendors(tier_type),
                      self._apply_customer_vendors)
        return True

    def _apply_customer_vendors(self, result: ResolutionResult):
        self.options.customer_vendors = result.options

    # ==================== Queries ====================

    def search_customer_vendors(self, query: str) -> List[CustomerVendor]:
        tier_type = self.options.tier_type_for(self.form.selected_type_id)
        return search_customer_vendors(self.options.customer_vendors or [], query, tier_type)

    def search_circuits(self, query: str) -> List[Circuit]:
        return search_circuits(self.options.circuits or [], query)

    def _current_warnings(self) -> List[str]:
        return list(self.options.warnings.values())

    def review_summary(self) -> Dict[str, Any]:
        """Human-readable selections shown on the Review step."""
        form = self.form
        options = self.options

        if form.responsibility_centre_locked and self.user_profile.responsibility_centre:
            centre = self.user_profile.responsibility_centre
        else:
            centre = options.responsibility_centre(form.responsibility_centre_id)

        doc_type = options.document_type(form.selected_type_id)
        subtype = options.subtype(form.selected_sub_type_id)
        tier_type = options.tier_type_for(form.selected_type_id)
        entity = form.selected_customer_vendor

        summary = {
            "responsibility_centre": centre.display_name if centre else None,
            "doc_date": to_date_isoformat(form.doc_date),
            "comptable_date": to_date_isoformat(form.comptable_date),
            "document_type": doc_type.display_name if doc_type else None,
            "subtype": subtype.display_name if subtype else None,
            "title": form.title,
            "content": form.content,
            "is_external": form.is_external,
            "external_reference": form.external_reference if form.is_external else None,
            "document_alias": form.document_alias if not form.is_external else "",
            "customer_vendor": None,
            "circuit": form.circuit_name if form.circuit_id is not None else STATIC_DOCUMENT_LABEL,
        }
        if tier_type.requires_customer_vendor and entity is not None:
            summary["customer_vendor"] = {
                "kind": tier_type.label,
                "code": entity.code_for(tier_type),
                "name": form.customer_vendor_name,
                "address": form.customer_vendor_address,
                "city": form.customer_vendor_city,
                "country": form.customer_vendor_country,
            }
        return summary


def build_document_wizard(
    user_profile: Optional[UserProfile] = None,
    services: Optional[WizardServices] = None,
    dispatcher: Optional[ResolutionDispatcher] = None,
    start: bool = True
) -> DocumentWizardController:
    """
    Wire a controller to the live HTTP services and start resolving.

    Args:
        user_profile: Operating user (None = no assigned centre)
        services: Service bundle (defaults to the HTTP services)
        dispatcher: Dispatcher (defaults to Config.RESOLUTION_MODE)
        start: Whether to kick off the initial resolutions
    """
    controller = DocumentWizardController(
        services=services or WizardServices.http(),
        user_profile=user_profile,
        dispatcher=dispatcher,
    )
    if start:
        controller.start()
    return controller
