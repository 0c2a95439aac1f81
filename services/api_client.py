# -*- coding: utf-8 -*-
"""
Document Management API Client
==============================

HTTP access to the document management backend for the endpoints the
create-document wizard depends on: document types, series, circuits,
customers, vendors, responsibility centres, user info and document creation.

Authentication is owned by the external session layer, which hands the
bearer token over through set_access_token() (or Config.API_TOKEN).
"""

import json
import requests
import urllib3
from typing import Optional, Dict, List, Any
from dataclasses import dataclass
from datetime import datetime, timedelta

from utils.logger import get_logger
from services.exceptions import ApiException, NetworkException

# Suppress SSL warnings for self-signed certificates in development
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = get_logger(__name__)

_MAX_LOGGED_BODY = 1000


@dataclass
class ApiConfig:
    """
    Connection settings for the backend API.

    Values left as None are loaded from Config (which reads the .env file).
    """
    base_url: str = None
    timeout: int = None
    verify_ssl: bool = None
    access_token: Optional[str] = None

    def __post_init__(self):
        """Load from Config if not provided."""
        from app.config import Config

        if self.base_url is None:
            self.base_url = Config.API_BASE_URL
        if self.timeout is None:
            self.timeout = Config.API_TIMEOUT
        if self.verify_ssl is None:
            self.verify_ssl = Config.API_VERIFY_SSL
        if self.access_token is None:
            self.access_token = Config.API_TOKEN


class DocManagementApiClient:
    """
    API client for the document management backend.

    Features:
    - Bearer token handed over by the session layer
    - Request/response logging
    - requests errors mapped to ApiException / NetworkException

    Usage:
        client = DocManagementApiClient(ApiConfig(base_url="http://localhost:5000/api"))
        types = client.get_document_types()
    """

    def __init__(self, config: ApiConfig):
        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.access_token: Optional[str] = config.access_token
        self.token_expires_at: Optional[datetime] = None

    # ==================== Authentication ====================

    def set_access_token(self, token: str, expires_in: int = 3600):
        """
        Set the access token from the authenticated session.

        Args:
            token: Access token to use
            expires_in: Token lifetime in seconds
        """
        self.access_token = token
        self.token_expires_at = datetime.now() + timedelta(seconds=expires_in)
        logger.debug(f"Access token updated externally (expires in {expires_in}s)")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Any:
        """
        Execute an HTTP request with error mapping.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., "/Documents/Types")
            json_data: JSON payload
            params: Query parameters

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            ApiException: the server answered with an error status
            NetworkException: the server could not be reached
        """
        url = f"{self.base_url}{endpoint}"

        logger.info(f"[API REQ] {method} {endpoint}")
        if params:
            logger.debug(f"[API REQ] Params: {params}")
        if json_data is not None:
            logger.debug(f"[API REQ] Body: {json.dumps(json_data, ensure_ascii=False, default=str)}")

        try:
            response = requests.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                headers=self._headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
            response.raise_for_status()

            result = None
            if response.text:
                result = response.json()

            logger.info(f"[API RES] {response.status_code} {endpoint}")
            if result is not None:
                body = json.dumps(result, ensure_ascii=False, default=str)
                if len(body) > _MAX_LOGGED_BODY:
                    body = f"{body[:_MAX_LOGGED_BODY]}..."
                logger.debug(f"[API RES] Body: {body}")

            return result

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except ValueError:
                pass
            if not isinstance(response_data, dict):
                response_data = {"message": str(response_data)}
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            raise ApiException(
                message=str(e),
                status_code=status_code,
                response_data=response_data,
                endpoint=endpoint
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Network error: {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e, endpoint=endpoint)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e, endpoint=endpoint)

    @staticmethod
    def _as_list(result: Any, endpoint: str) -> List[Dict[str, Any]]:
        """Validate that a list endpoint returned a JSON array."""
        if result is None:
            return []
        if not isinstance(result, list):
            raise ApiException(
                message=f"Unexpected response format from {endpoint}",
                response_data={"body": result},
                endpoint=endpoint
            )
        return result

    # ==================== Reference data ====================

    def get_document_types(self) -> List[Dict[str, Any]]:
        """GET /Documents/Types → [{id, typeName, typeKey, tierType}]."""
        endpoint = "/Documents/Types"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_series_for_date(self, type_id: int, iso_date: str) -> List[Dict[str, Any]]:
        """
        GET /Series/for-date/{typeId}/{date}.

        Args:
            type_id: Document type id
            iso_date: Document date as YYYY-MM-DD

        Returns:
            Series DTOs ({id, subTypeKey, name, startDate, endDate, isActive})
        """
        endpoint = f"/Series/for-date/{type_id}/{iso_date}"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_circuits(self) -> List[Dict[str, Any]]:
        """GET /Circuit → all circuits, active or not."""
        endpoint = "/Circuit"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_customers(self) -> List[Dict[str, Any]]:
        """GET /Customer → [{code, name, address, city, country}]."""
        endpoint = "/Customer"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_vendors(self) -> List[Dict[str, Any]]:
        """GET /Vendor → [{vendorCode, name, address, city, country}]."""
        endpoint = "/Vendor"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_responsibility_centres_simple(self) -> List[Dict[str, Any]]:
        """GET /ResponsibilityCentre/simple → [{id, code, descr}]."""
        endpoint = "/ResponsibilityCentre/simple"
        return self._as_list(self._request("GET", endpoint), endpoint)

    def get_user_info(self) -> Dict[str, Any]:
        """GET /Account/user-info → current user, including any assigned centre."""
        return self._request("GET", "/Account/user-info") or {}

    # ==================== Documents ====================

    def create_document(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST /Documents.

        Args:
            payload: Creation request produced by RequestAssembler

        Returns:
            Created document ({id, ...})
        """
        result = self._request("POST", "/Documents", json_data=payload)
        logger.info(f"Document created: id={(result or {}).get('id')}")
        return result or {}


# ==================== Singleton Instance ====================

_api_client_instance: Optional[DocManagementApiClient] = None


def get_api_client(config: Optional[ApiConfig] = None) -> DocManagementApiClient:
    """
    Get the shared API client instance.

    Args:
        config: API configuration (only used on first call)
    """
    global _api_client_instance

    if _api_client_instance is None:
        if config is None:
            config = ApiConfig()
        _api_client_instance = DocManagementApiClient(config)

    return _api_client_instance


def reset_api_client():
    """Drop the shared API client (for tests)."""
    global _api_client_instance
    _api_client_instance = None
