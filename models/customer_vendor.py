# -*- coding: utf-8 -*-
"""
Customer / vendor entity model.

Customers are identified by ``code``, vendors by ``vendorCode``; the two
catalogues share every other field.
"""

from dataclasses import dataclass
from typing import Optional

from .document_type import TierType


@dataclass
class CustomerVendor:
    """A third party referenced by a document (customer or vendor)."""

    code: Optional[str] = None
    vendor_code: Optional[str] = None
    name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""

    def code_for(self, tier_type: TierType) -> Optional[str]:
        """Return the identifying code for the given tier type."""
        if tier_type == TierType.CUSTOMER:
            return self.code or None
        if tier_type == TierType.VENDOR:
            return self.vendor_code or None
        return None

    def matches(self, query: str, tier_type: TierType) -> bool:
        """Case-insensitive substring match on name or tier-appropriate code."""
        if not query:
            return True
        needle = query.strip().lower()
        code = self.code_for(tier_type) or ""
        return needle in (self.name or "").lower() or needle in code.lower()

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "vendorCode": self.vendor_code,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CustomerVendor":
        return cls(
            code=data.get("code"),
            vendor_code=data.get("vendorCode", data.get("vendor_code")),
            name=data.get("name", "") or "",
            address=data.get("address", "") or "",
            city=data.get("city", "") or "",
            country=data.get("country", "") or "",
        )
