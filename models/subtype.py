# -*- coding: utf-8 -*-
"""
Series (document subtype) entity model.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from utils.datetime_utils import DateLike, is_date_in_range, parse_date, to_date_isoformat


@dataclass
class SubType:
    """
    Time-bounded sub-classification of a document type.

    A series is usable for a document only while it is active and the
    document date falls inside [start_date, end_date].
    """

    id: int
    sub_type_key: str = ""
    name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True
    description: str = ""
    document_type_id: Optional[int] = None

    def is_valid_on(self, value: DateLike) -> bool:
        """Check the inclusive, day-normalized validity range."""
        return is_date_in_range(value, self.start_date, self.end_date)

    def is_eligible_on(self, value: DateLike) -> bool:
        """Active and valid on the given date."""
        return bool(self.is_active) and self.is_valid_on(value)

    @property
    def display_name(self) -> str:
        if self.name and self.sub_type_key:
            return f"{self.sub_type_key} - {self.name}"
        return self.sub_type_key or self.name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subTypeKey": self.sub_type_key,
            "name": self.name,
            "startDate": to_date_isoformat(self.start_date),
            "endDate": to_date_isoformat(self.end_date),
            "isActive": self.is_active,
            "description": self.description,
            "documentTypeId": self.document_type_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SubType":
        """Create SubType from an API DTO (camelCase) or snake_case dict."""
        document_type_id = data.get("documentTypeId", data.get("document_type_id"))
        return cls(
            id=int(data.get("id")),
            sub_type_key=data.get("subTypeKey", data.get("sub_type_key", "")) or "",
            name=data.get("name", "") or "",
            start_date=parse_date(data.get("startDate", data.get("start_date"))),
            end_date=parse_date(data.get("endDate", data.get("end_date"))),
            is_active=bool(data.get("isActive", data.get("is_active", True))),
            description=data.get("description", "") or "",
            document_type_id=int(document_type_id) if document_type_id is not None else None,
        )
