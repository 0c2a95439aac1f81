# -*- coding: utf-8 -*-
"""
Document Context - FormState of the create-document wizard.

Holds every user-entered value of one wizard session plus the option sets the
ConstraintResolver produced for it. Only DocumentWizardController mutates it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Set

from models import (
    Circuit,
    CustomerVendor,
    DocumentType,
    ResponsibilityCentre,
    SubType,
    TierType,
    UserProfile,
    find_document_type,
)
from ui.wizards.framework.wizard_context import WizardContext
from utils.datetime_utils import parse_date, to_date_isoformat


# Default value of every user-editable field
FIELD_DEFAULTS: Dict[str, Any] = {
    "responsibility_centre_id": None,
    "doc_date": None,
    "comptable_date": None,
    "selected_type_id": None,
    "selected_sub_type_id": None,
    "title": "",
    "content": "",
    "document_alias": "",
    "is_external": False,
    "external_reference": "",
    "circuit_id": None,
    "circuit_name": "",
    "selected_customer_vendor": None,
    "customer_vendor_name": "",
    "customer_vendor_address": "",
    "customer_vendor_city": "",
    "customer_vendor_country": "",
}

CUSTOMER_VENDOR_OVERRIDES = (
    "customer_vendor_name",
    "customer_vendor_address",
    "customer_vendor_city",
    "customer_vendor_country",
)

# field -> fields it invalidates when it changes (applied transitively)
FIELD_DEPENDENCIES: Dict[str, List[str]] = {
    "doc_date": ["selected_type_id"],
    "selected_type_id": ["selected_sub_type_id", "circuit_id"],
    "circuit_id": ["circuit_name"],
    "selected_customer_vendor": list(CUSTOMER_VENDOR_OVERRIDES),
}


def dependents_of(field_name: str) -> List[str]:
    """All fields invalidated by a change of field_name, in cascade order."""
    ordered: List[str] = []
    pending = list(FIELD_DEPENDENCIES.get(field_name, []))
    while pending:
        name = pending.pop(0)
        if name in ordered:
            continue
        ordered.append(name)
        pending.extend(FIELD_DEPENDENCIES.get(name, []))
    return ordered


@dataclass
class ResolvedOptions:
    """
    Option sets resolved for the current FormState.

    A list of None means "not resolved yet"; an empty list means the lookup
    succeeded with nothing eligible. Failures are recorded per channel in
    `errors`, non-blocking notices in `warnings` / `infos`.
    """
    document_types: List[DocumentType] = field(default_factory=list)
    types_for_date: Optional[List[DocumentType]] = None
    subtypes: Optional[List[SubType]] = None
    circuits: Optional[List[Circuit]] = None
    responsibility_centres: Optional[List[ResponsibilityCentre]] = None
    customer_vendors: Optional[List[CustomerVendor]] = None
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)
    infos: Dict[str, str] = field(default_factory=dict)
    fallback_channels: Set[str] = field(default_factory=set)

    def document_type(self, type_id: Optional[int]) -> Optional[DocumentType]:
        return find_document_type(self.document_types, type_id)

    def tier_type_for(self, type_id: Optional[int]) -> TierType:
        doc_type = self.document_type(type_id)
        return doc_type.tier_type if doc_type else TierType.NONE

    def subtype(self, sub_type_id: Optional[int]) -> Optional[SubType]:
        for sub in self.subtypes or []:
            if sub.id == sub_type_id:
                return sub
        return None

    def circuit(self, circuit_id: Optional[int]) -> Optional[Circuit]:
        for circuit in self.circuits or []:
            if circuit.id == circuit_id:
                return circuit
        return None

    def responsibility_centre(self, centre_id: Optional[int]) -> Optional[ResponsibilityCentre]:
        for centre in self.responsibility_centres or []:
            if centre.id == centre_id:
                return centre
        return None

    def clear_channel(self, channel: str):
        """Forget the outcome of a channel (options stay as set by the caller)."""
        self.errors.pop(channel, None)
        self.warnings.pop(channel, None)
        self.infos.pop(channel, None)
        self.fallback_channels.discard(channel)


class DocumentFormState(WizardContext):
    """
    Create-document wizard context.

    Field values are public attributes named after FIELD_DEFAULTS. Dates are
    stored as `date` when they parse; an unparseable raw value is kept as-is
    so the Date step can report it.
    """

    def __init__(self, user_profile: Optional[UserProfile] = None, doc_date: Any = None):
        super().__init__()
        for name, default in FIELD_DEFAULTS.items():
            setattr(self, name, default)

        self.doc_date = parse_date(doc_date) if doc_date is not None else date.today()

        self.responsibility_centre_locked = False
        if user_profile is not None and user_profile.has_responsibility_centre:
            self.responsibility_centre_id = user_profile.responsibility_centre_id
            self.responsibility_centre_locked = True

        self.field_errors: Dict[str, str] = {}
        self.submission_error: Optional[str] = None
        self.created_document: Optional[Dict[str, Any]] = None

    def _get_reference_prefix(self) -> str:
        return "DOC"

    # ==================== Field access ====================

    def get_field(self, name: str) -> Any:
        return getattr(self, name)

    def set_field(self, name: str, value: Any):
        setattr(self, name, value)
        self.touch()

    def reset_field(self, name: str):
        self.set_field(name, FIELD_DEFAULTS[name])

    def clear_error(self, name: str):
        self.field_errors.pop(name, None)

    def clear_fields(self):
        """Discard every entered value (wizard closed)."""
        for name, default in FIELD_DEFAULTS.items():
            setattr(self, name, default)
        self.field_errors.clear()
        self.responsibility_centre_locked = False
        self.touch()

    def snapshot(self) -> Dict[str, Any]:
        """Read-only copy of the field values for presentation code."""
        return {name: getattr(self, name) for name in FIELD_DEFAULTS}

    # ==================== Customer / vendor ====================

    def seed_customer_vendor(self, entity: Optional[CustomerVendor]):
        """Select an entity and copy its display fields into the overrides."""
        self.selected_customer_vendor = entity
        self.customer_vendor_name = entity.name if entity else ""
        self.customer_vendor_address = entity.address if entity else ""
        self.customer_vendor_city = entity.city if entity else ""
        self.customer_vendor_country = entity.country if entity else ""
        self.touch()

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        values = self.snapshot()
        values["doc_date"] = to_date_isoformat(self.doc_date) or self.doc_date
        values["comptable_date"] = to_date_isoformat(self.comptable_date) or self.comptable_date
        if self.selected_customer_vendor is not None:
            values["selected_customer_vendor"] = self.selected_customer_vendor.to_dict()
        data.update({
            "fields": values,
            "responsibility_centre_locked": self.responsibility_centre_locked,
            "field_errors": dict(self.field_errors),
            "submission_error": self.submission_error,
            "created_document": self.created_document,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentFormState':
        context = cls()
        cls._restore_base_fields(context, data)

        values = data.get("fields", {})
        for name in FIELD_DEFAULTS:
            if name in values:
                setattr(context, name, values[name])

        context.doc_date = parse_date(values.get("doc_date")) or values.get("doc_date")
        context.comptable_date = parse_date(values.get("comptable_date")) or values.get("comptable_date")
        entity = values.get("selected_customer_vendor")
        context.selected_customer_vendor = CustomerVendor.from_dict(entity) if entity else None

        context.responsibility_centre_locked = data.get("responsibility_centre_locked", False)
        context.field_errors = dict(data.get("field_errors", {}))
        context.submission_error = data.get("submission_error")
        context.created_document = data.get("created_document")
        return context
