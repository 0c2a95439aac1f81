# -*- coding: utf-8 -*-
"""
Constraint Resolver - maps a FormState slice to the externally valid option sets.

Every resolve_* method is a blocking call meant to run on a resolution
worker (see services.wizard.resolution_dispatcher). Methods either return a
ResolutionResult or raise; it is the controller's job to decide whether a
result is still current when it arrives.

Degraded mode:
- Series lookups fall back to the static provider, filtered by the same rule.
- Document type lookups fall back to the static catalogue.
- Circuits, responsibility centres and customers/vendors have no safe
  default: failures propagate and the owning step becomes retryable.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar

from models import Circuit, CustomerVendor, DocumentType, ResponsibilityCentre, SubType, TierType
from services.document_api_service import WizardServices
from services.exceptions import ValidationException
from utils.datetime_utils import DateLike, parse_date
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


@dataclass
class ResolutionResult(Generic[T]):
    """Outcome of one resolution call."""
    options: List[T] = field(default_factory=list)
    used_fallback: bool = False
    auto_selected: Optional[T] = None
    warning: str = ""

    @property
    def is_empty(self) -> bool:
        return len(self.options) == 0


def filter_eligible_subtypes(series: Sequence[SubType], doc_date: DateLike) -> List[SubType]:
    """Keep active series whose [start, end] range contains doc_date (day-normalized)."""
    eligible = [s for s in series if s.is_eligible_on(doc_date)]
    logger.debug(
        f"Series filter for {doc_date}: {len(eligible)}/{len(series)} eligible "
        f"({[s.sub_type_key for s in eligible]})"
    )
    return eligible


def filter_eligible_circuits(circuits: Sequence[Circuit], type_id: Optional[int]) -> List[Circuit]:
    """Keep active circuits without a type affinity or with an affinity for type_id."""
    return [c for c in circuits if c.is_eligible_for(type_id)]


def search_circuits(circuits: Sequence[Circuit], query: str) -> List[Circuit]:
    """Case-insensitive substring search on circuit title or description."""
    if not query:
        return list(circuits)
    needle = query.strip().lower()
    return [
        c for c in circuits
        if needle in c.title.lower() or needle in c.description.lower()
    ]


def search_customer_vendors(
    entities: Sequence[CustomerVendor], query: str, tier_type: TierType
) -> List[CustomerVendor]:
    """Case-insensitive substring search on name or the tier-appropriate code."""
    return [e for e in entities if e.matches(query, tier_type)]


class ConstraintResolver:
    """
    Resolves valid option sets from the external services.

    Args:
        services: Live service bundle
        fallback: Static provider used when series/type lookups fail
                  (None disables degraded mode)
    """

    def __init__(self, services: WizardServices, fallback=None):
        self.services = services
        self.fallback = fallback

    # ------------------------------------------------------------------
    # Document types
    # ------------------------------------------------------------------

    def resolve_document_types(self) -> ResolutionResult[DocumentType]:
        try:
            types = self.services.document_types.get_all()
        except Exception as e:
            if self.fallback is None:
                raise
            logger.error(f"Failed to fetch document types, using fallback catalogue: {e}")
            return ResolutionResult(
                options=self.fallback.get_all(),
                used_fallback=True,
                warning="Document types could not be loaded. Using fallback data.",
            )

        if not types:
            return ResolutionResult(
                options=[],
                warning="No document types found. Create document types before creating documents.",
            )
        return ResolutionResult(options=types)

    def resolve_types_for_date(
        self, document_types: Sequence[DocumentType], doc_date: DateLike
    ) -> ResolutionResult[DocumentType]:
        """
        Keep the document types that have at least one active series valid on doc_date.

        A type whose series lookup fails is excluded rather than guessed at.
        If every lookup fails the last error is raised: the filter is then
        unknown, not empty.
        """
        day = self._require_date(doc_date)
        valid_types = []
        failures = 0
        last_error = None
        for doc_type in document_types:
            try:
                series = self.services.series.valid_for(doc_type.id, day.isoformat())
            except Exception as e:
                logger.error(f"Error checking series for document type {doc_type.id}: {e}")
                failures += 1
                last_error = e
                continue
            if filter_eligible_subtypes(series, day):
                valid_types.append(doc_type)

        if last_error is not None and failures == len(document_types):
            raise last_error

        logger.info(f"Found {len(valid_types)} valid document types out of {len(document_types)} for {day}")
        warning = ""
        if not valid_types:
            warning = ("No document types have active series for the selected date. "
                       "Select a different date or create series with valid date ranges.")
        return ResolutionResult(options=valid_types, warning=warning)

    # ------------------------------------------------------------------
    # Series / subtypes
    # ------------------------------------------------------------------

    def resolve_subtypes(self, type_id: int, doc_date: DateLike) -> ResolutionResult[SubType]:
        """
        Resolve the series a document of type_id may use on doc_date.

        Exactly one eligible series is returned as auto_selected; none
        produces a warning and the caller must change type or date.
        """
        day = self._require_date(doc_date)
        iso_date = day.isoformat()
        used_fallback = False

        try:
            series = self.services.series.valid_for(type_id, iso_date)
        except Exception as e:
            if self.fallback is None:
                raise
            logger.error(f"Failed to fetch series for type {type_id} on {iso_date}, using fallback: {e}")
            series = self.fallback.valid_for(type_id, iso_date)
            used_fallback = True

        eligible = filter_eligible_subtypes(series, day)
        result = ResolutionResult(options=eligible, used_fallback=used_fallback)

        if not eligible:
            result.warning = (f"No valid series available for this document type on {iso_date}. "
                              "Select a different document type or date.")
        elif used_fallback:
            result.warning = "Series could not be loaded from the server. Using fallback data."

        if len(eligible) == 1:
            result.auto_selected = eligible[0]
            logger.info(f"Auto-selecting single available series: {eligible[0].sub_type_key}")
        return result

    # ------------------------------------------------------------------
    # Circuits
    # ------------------------------------------------------------------

    def resolve_circuits(self, type_id: Optional[int]) -> ResolutionResult[Circuit]:
        """Eligible circuits for type_id. Never auto-selects; "no circuit" is always allowed."""
        circuits = self.services.circuits.get_all()
        eligible = filter_eligible_circuits(circuits, type_id)
        logger.info(f"Circuits for type {type_id}: {len(eligible)}/{len(circuits)} eligible")
        warning = ""
        if not eligible:
            warning = ("No active circuits available for this document type. "
                       "You can continue without assigning a circuit.")
        return ResolutionResult(options=eligible, warning=warning)

    # ------------------------------------------------------------------
    # Responsibility centres
    # ------------------------------------------------------------------

    def resolve_responsibility_centres(self) -> ResolutionResult[ResponsibilityCentre]:
        centres = self.services.responsibility_centres.get_simple()
        warning = ""
        if not centres:
            warning = ("No responsibility centres available. "
                       "Contact your administrator to set up responsibility centres.")
        return ResolutionResult(options=centres, warning=warning)

    # ------------------------------------------------------------------
    # Customers / vendors
    # ------------------------------------------------------------------

    def resolve_customer_vendors(self, tier_type: TierType) -> ResolutionResult[CustomerVendor]:
        """Load the customer or vendor catalogue matching the type's tier."""
        if tier_type == TierType.CUSTOMER:
            entities = self.services.customers.get_all()
        elif tier_type == TierType.VENDOR:
            entities = self.services.vendors.get_all()
        else:
            return ResolutionResult(options=[])

        warning = ""
        if not entities:
            warning = f"No {tier_type.label}s available."
        return ResolutionResult(options=entities, warning=warning)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_date(doc_date: DateLike):
        day = parse_date(doc_date)
        if day is None:
            raise ValidationException("Invalid document date", field="doc_date")
        return day
