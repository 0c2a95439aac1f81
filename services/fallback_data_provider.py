# -*- coding: utf-8 -*-
"""
Fallback Data Provider for degraded mode.

Static substitutes used when the live backend cannot resolve reference data.
The provider implements the same service interfaces as the HTTP services so
the ConstraintResolver treats it exactly like the live source: fallback
series go through the same active/date filter as live ones.

Only data with a safe default has a fallback here (document types and
series). Responsibility centres, circuits and customers/vendors have none.
"""

from datetime import date
from typing import Dict, List, Optional

from models import DocumentType, SubType, TierType
from services.document_api_service import DocumentTypeService, SeriesService
from utils.logger import get_logger

logger = get_logger(__name__)

_FALLBACK_START = date(2023, 1, 1)
_FALLBACK_END = date(2025, 12, 31)


def _series(id_: int, key: str, name: str, description: str, type_id: int) -> SubType:
    return SubType(
        id=id_,
        sub_type_key=key,
        name=name,
        description=description,
        start_date=_FALLBACK_START,
        end_date=_FALLBACK_END,
        is_active=True,
        document_type_id=type_id,
    )


DEFAULT_DOCUMENT_TYPES: List[DocumentType] = [
    DocumentType(id=1, type_name="Invoice", type_key="INV", tier_type=TierType.NONE),
    DocumentType(id=2, type_name="Contract", type_key="CON", tier_type=TierType.NONE),
    DocumentType(id=3, type_name="Report", type_key="REP", tier_type=TierType.NONE),
]

DEFAULT_SERIES: Dict[int, List[SubType]] = {
    1: [
        _series(101, "SI", "Standard Invoice", "Standard invoice for regular billing", 1),
        _series(102, "TI", "Tax Invoice", "Invoice with tax details included", 1),
    ],
    2: [
        _series(201, "EC", "Employment Contract", "Contract for employment purposes", 2),
        _series(202, "SA", "Service Agreement", "Agreement for service provision", 2),
    ],
    3: [
        _series(301, "MR", "Monthly Report", "Regular monthly reporting document", 3),
        _series(302, "AR", "Annual Report", "Yearly comprehensive report", 3),
    ],
}


class FallbackDataProvider(DocumentTypeService, SeriesService):
    """
    Static document types and series.

    Features:
    - Same interface as HttpDocumentTypeService / HttpSeriesService
    - Overridable tables (tests and deployments can inject their own)
    - Returns copies so callers can never mutate the built-in tables
    """

    def __init__(
        self,
        document_types: Optional[List[DocumentType]] = None,
        series: Optional[Dict[int, List[SubType]]] = None
    ):
        self._document_types = list(document_types if document_types is not None else DEFAULT_DOCUMENT_TYPES)
        self._series = dict(series if series is not None else DEFAULT_SERIES)

    def get_all(self) -> List[DocumentType]:
        logger.warning(f"Using fallback document types ({len(self._document_types)} entries)")
        return [
            DocumentType(id=t.id, type_name=t.type_name, type_key=t.type_key, tier_type=t.tier_type)
            for t in self._document_types
        ]

    def valid_for(self, type_id: int, iso_date: str) -> List[SubType]:
        """
        Return every static series of the type.

        The date is not applied here; the resolver filters fallback series
        with the same rule as live ones.
        """
        series = self._series.get(type_id, [])
        logger.warning(f"Using fallback series for type {type_id}: {len(series)} candidates")
        return [SubType(**vars(s)) for s in series]
