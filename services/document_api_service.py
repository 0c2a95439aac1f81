# -*- coding: utf-8 -*-
"""
Document API Services - read/query and command operations used by the
create-document wizard.

Each service is an abstract interface plus an HTTP implementation backed by
DocManagementApiClient. The wizard only depends on the interfaces, so tests
and the degraded-mode fallback provider can stand in for the live backend.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models import (
    Circuit,
    CustomerVendor,
    DocumentType,
    ResponsibilityCentre,
    SubType,
    UserProfile,
)
from services.api_client import DocManagementApiClient, get_api_client
from utils.logger import get_logger

logger = get_logger(__name__)


# ==================== Interfaces ====================

class DocumentTypeService(ABC):
    """Catalogue of document types."""

    @abstractmethod
    def get_all(self) -> List[DocumentType]:
        pass


class SeriesService(ABC):
    """Series (subtypes) of a document type."""

    @abstractmethod
    def valid_for(self, type_id: int, iso_date: str) -> List[SubType]:
        """Series of a type the backend considers relevant for a date (active or not)."""
        pass


class CircuitService(ABC):
    """Approval circuits."""

    @abstractmethod
    def get_all(self) -> List[Circuit]:
        pass


class CustomerService(ABC):

    @abstractmethod
    def get_all(self) -> List[CustomerVendor]:
        pass


class VendorService(ABC):

    @abstractmethod
    def get_all(self) -> List[CustomerVendor]:
        pass


class ResponsibilityCentreService(ABC):

    @abstractmethod
    def get_simple(self) -> List[ResponsibilityCentre]:
        pass


class DocumentService(ABC):
    """Document creation command."""

    @abstractmethod
    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        pass


# ==================== HTTP implementations ====================

class _HttpService:
    """Shared constructor for services backed by the API client."""

    def __init__(self, api_client: Optional[DocManagementApiClient] = None):
        self._api = api_client or get_api_client()


class HttpDocumentTypeService(_HttpService, DocumentTypeService):

    def get_all(self) -> List[DocumentType]:
        types = [DocumentType.from_dict(dto) for dto in self._api.get_document_types()]
        logger.debug(f"Loaded {len(types)} document types")
        return types


class HttpSeriesService(_HttpService, SeriesService):

    def valid_for(self, type_id: int, iso_date: str) -> List[SubType]:
        series = [SubType.from_dict(dto) for dto in self._api.get_series_for_date(type_id, iso_date)]
        logger.debug(f"Loaded {len(series)} series for type {type_id} on {iso_date}")
        return series


class HttpCircuitService(_HttpService, CircuitService):

    def get_all(self) -> List[Circuit]:
        return [Circuit.from_dict(dto) for dto in self._api.get_circuits()]


class HttpCustomerService(_HttpService, CustomerService):

    def get_all(self) -> List[CustomerVendor]:
        return [CustomerVendor.from_dict(dto) for dto in self._api.get_customers()]


class HttpVendorService(_HttpService, VendorService):

    def get_all(self) -> List[CustomerVendor]:
        return [CustomerVendor.from_dict(dto) for dto in self._api.get_vendors()]


class HttpResponsibilityCentreService(_HttpService, ResponsibilityCentreService):

    def get_simple(self) -> List[ResponsibilityCentre]:
        return [
            ResponsibilityCentre.from_dict(dto)
            for dto in self._api.get_responsibility_centres_simple()
        ]


class HttpDocumentService(_HttpService, DocumentService):

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._api.create_document(payload)

    def get_current_user(self) -> UserProfile:
        """Resolve the operating user's profile (including any assigned centre)."""
        return UserProfile.from_dict(self._api.get_user_info())


# ==================== Bundle ====================

@dataclass
class WizardServices:
    """The external collaborators the create-document wizard talks to."""
    document_types: DocumentTypeService
    series: SeriesService
    circuits: CircuitService
    customers: CustomerService
    vendors: VendorService
    responsibility_centres: ResponsibilityCentreService
    documents: DocumentService

    @classmethod
    def http(cls, api_client: Optional[DocManagementApiClient] = None) -> "WizardServices":
        """Build the live HTTP-backed service set."""
        api = api_client or get_api_client()
        return cls(
            document_types=HttpDocumentTypeService(api),
            series=HttpSeriesService(api),
            circuits=HttpCircuitService(api),
            customers=HttpCustomerService(api),
            vendors=HttpVendorService(api),
            responsibility_centres=HttpResponsibilityCentreService(api),
            documents=HttpDocumentService(api),
        )
