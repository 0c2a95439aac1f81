# -*- coding: utf-8 -*-
"""
Document type entity model.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class TierType(IntEnum):
    """Which third party (if any) documents of a type must reference."""
    NONE = 0
    CUSTOMER = 1
    VENDOR = 2

    @classmethod
    def from_value(cls, value) -> "TierType":
        """Parse an API value (int, numeric string or name) into a TierType."""
        if isinstance(value, TierType):
            return value
        if value is None or value == "":
            return cls.NONE
        if isinstance(value, str) and not value.isdigit():
            return cls.__members__.get(value.strip().upper(), cls.NONE)
        try:
            return cls(int(value))
        except ValueError:
            return cls.NONE

    @property
    def requires_customer_vendor(self) -> bool:
        return self in (TierType.CUSTOMER, TierType.VENDOR)

    @property
    def label(self) -> str:
        return {
            TierType.NONE: "none",
            TierType.CUSTOMER: "customer",
            TierType.VENDOR: "vendor",
        }[self]


@dataclass
class DocumentType:
    """
    Document classification (Invoice, Contract, ...).

    tier_type decides whether documents of this type carry a customer,
    a vendor, or neither.
    """

    id: int
    type_name: str = ""
    type_key: str = ""
    tier_type: TierType = TierType.NONE

    @property
    def display_name(self) -> str:
        if self.type_key:
            return f"{self.type_name} ({self.type_key})"
        return self.type_name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "typeName": self.type_name,
            "typeKey": self.type_key,
            "tierType": int(self.tier_type),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentType":
        """Create DocumentType from an API DTO (camelCase) or snake_case dict."""
        return cls(
            id=int(data.get("id")),
            type_name=data.get("typeName", data.get("type_name", "")) or "",
            type_key=data.get("typeKey", data.get("type_key", "")) or "",
            tier_type=TierType.from_value(data.get("tierType", data.get("tier_type"))),
        )


def find_document_type(types, type_id: Optional[int]) -> Optional[DocumentType]:
    """Look up a document type by id in a sequence of types."""
    if type_id is None:
        return None
    for doc_type in types or []:
        if doc_type.id == type_id:
            return doc_type
    return None
