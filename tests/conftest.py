# -*- coding: utf-8 -*-
"""
Shared fixtures: in-memory services and a manual dispatcher.
"""

import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Headless Qt for CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models import (  # noqa: E402
    Circuit,
    CustomerVendor,
    DocumentType,
    ResponsibilityCentre,
    SubType,
    TierType,
    UserProfile,
)
from services.constraint_resolver import ConstraintResolver  # noqa: E402
from services.document_api_service import (  # noqa: E402
    CircuitService,
    CustomerService,
    DocumentService,
    DocumentTypeService,
    ResponsibilityCentreService,
    SeriesService,
    VendorService,
    WizardServices,
)
from services.exceptions import NetworkException  # noqa: E402
from services.fallback_data_provider import FallbackDataProvider  # noqa: E402
from services.wizard.resolution_dispatcher import ResolutionDispatcher  # noqa: E402


# ==================== Fake services ====================

class _Failable:
    """Raises `error` on every call when set; counts calls."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def _record(self, *args):
        self.calls.append(args)
        if self.error is not None:
            raise self.error


class FakeDocumentTypeService(_Failable, DocumentTypeService):

    def __init__(self, types, error=None):
        super().__init__(error)
        self.types = types

    def get_all(self):
        self._record()
        return list(self.types)


class FakeSeriesService(_Failable, SeriesService):

    def __init__(self, series_by_type, error=None, failing_types=()):
        super().__init__(error)
        self.series_by_type = series_by_type
        self.failing_types = set(failing_types)

    def valid_for(self, type_id, iso_date):
        self._record(type_id, iso_date)
        if type_id in self.failing_types:
            raise NetworkException("Connection refused")
        return list(self.series_by_type.get(type_id, []))


class FakeCircuitService(_Failable, CircuitService):

    def __init__(self, circuits, error=None):
        super().__init__(error)
        self.circuits = circuits

    def get_all(self):
        self._record()
        return list(self.circuits)


class FakeCustomerService(_Failable, CustomerService):

    def __init__(self, customers, error=None):
        super().__init__(error)
        self.customers = customers

    def get_all(self):
        self._record()
        return list(self.customers)


class FakeVendorService(_Failable, VendorService):

    def __init__(self, vendors, error=None):
        super().__init__(error)
        self.vendors = vendors

    def get_all(self):
        self._record()
        return list(self.vendors)


class FakeResponsibilityCentreService(_Failable, ResponsibilityCentreService):

    def __init__(self, centres, error=None):
        super().__init__(error)
        self.centres = centres

    def get_simple(self):
        self._record()
        return list(self.centres)


class FakeDocumentService(_Failable, DocumentService):

    def __init__(self, error=None):
        super().__init__(error)
        self.payloads = []

    def create(self, payload):
        self._record(payload)
        self.payloads.append(payload)
        return {"id": 500 + len(self.payloads), "title": payload.get("title")}


# ==================== Manual dispatcher ====================

class ManualDispatcher(ResolutionDispatcher):
    """Queues jobs; tests decide when (and in which order) they complete."""

    def __init__(self):
        self.jobs = []

    def dispatch(self, job, on_success, on_error):
        self.jobs.append((job, on_success, on_error))

    @property
    def pending(self) -> int:
        return len(self.jobs)

    def run(self, index: int = 0):
        job, on_success, on_error = self.jobs.pop(index)
        try:
            result = job()
        except Exception as e:
            on_error(e)
            return
        on_success(result)

    def run_all(self):
        while self.jobs:
            self.run(0)


# ==================== Reference data ====================

def _series(id_, key, start, end, active=True, type_id=None):
    return SubType(id=id_, sub_type_key=key, name=f"{key} series", start_date=start,
                   end_date=end, is_active=active, document_type_id=type_id)


@pytest.fixture
def document_types():
    return [
        DocumentType(id=1, type_name="Invoice", type_key="INV", tier_type=TierType.NONE),
        DocumentType(id=2, type_name="Sales Order", type_key="SO", tier_type=TierType.CUSTOMER),
        DocumentType(id=3, type_name="Purchase Order", type_key="PO", tier_type=TierType.VENDOR),
        DocumentType(id=4, type_name="Archive", type_key="ARC", tier_type=TierType.NONE),
    ]


@pytest.fixture
def series_table():
    return {
        1: [
            _series(11, "SI", date(2024, 1, 1), date(2024, 12, 31), type_id=1),
            _series(12, "OLD", date(2020, 1, 1), date(2020, 12, 31), type_id=1),
            _series(13, "INA", date(2024, 1, 1), date(2024, 12, 31), active=False, type_id=1),
        ],
        2: [
            _series(21, "SOA", date(2024, 1, 1), date(2024, 6, 30), type_id=2),
            _series(22, "SOB", date(2024, 3, 1), date(2024, 12, 31), type_id=2),
        ],
        3: [
            _series(31, "PO", date(2024, 1, 1), date(2024, 12, 31), type_id=3),
        ],
        4: [],
    }


@pytest.fixture
def circuits():
    return [
        Circuit(id=1, title="Invoice approval", circuit_key="INVAP", descriptif="Two-level approval",
                is_active=True, document_type_id=1),
        Circuit(id=2, title="General review", circuit_key="GEN", descriptif="Any document",
                is_active=True, document_type_id=None),
        Circuit(id=3, title="Retired", circuit_key="OLD", descriptif="No longer used",
                is_active=False, document_type_id=None),
        Circuit(id=4, title="Order approval", circuit_key="ORD", descriptif="Sales orders",
                is_active=True, document_type_id=2),
    ]


@pytest.fixture
def customers():
    return [
        CustomerVendor(code="C001", name="Acme Corp", address="1 Main St", city="Lyon", country="France"),
        CustomerVendor(code="C002", name="Initech", address="9 Side Rd", city="Paris", country="France"),
        CustomerVendor(code=None, vendor_code="V999", name="Codeless", city="Nice", country="France"),
    ]


@pytest.fixture
def vendors():
    return [
        CustomerVendor(vendor_code="V001", name="Globex", address="5 Port Ave", city="Rabat", country="Morocco"),
    ]


@pytest.fixture
def centres():
    return [
        ResponsibilityCentre(id=1, code="FIN", descr="Finance"),
        ResponsibilityCentre(id=2, code="OPS", descr="Operations"),
    ]


@pytest.fixture
def services(document_types, series_table, circuits, customers, vendors, centres):
    return WizardServices(
        document_types=FakeDocumentTypeService(document_types),
        series=FakeSeriesService(series_table),
        circuits=FakeCircuitService(circuits),
        customers=FakeCustomerService(customers),
        vendors=FakeVendorService(vendors),
        responsibility_centres=FakeResponsibilityCentreService(centres),
        documents=FakeDocumentService(),
    )


@pytest.fixture
def resolver(services):
    return ConstraintResolver(services, FallbackDataProvider())


@pytest.fixture
def profile_with_centre():
    return UserProfile(user_id=7, username="jdoe",
                       responsibility_centre=ResponsibilityCentre(id=1, code="FIN", descr="Finance"))


@pytest.fixture
def profile_without_centre():
    return UserProfile(user_id=8, username="asmith")


@pytest.fixture
def manual_dispatcher():
    return ManualDispatcher()
