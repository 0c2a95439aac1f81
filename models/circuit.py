# -*- coding: utf-8 -*-
"""
Circuit (approval workflow) entity model.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Circuit:
    """
    Named approval workflow a document can be bound to.

    document_type_id is the circuit's declared document-type affinity;
    None means the circuit accepts any type.
    """

    id: int
    title: str = ""
    circuit_key: str = ""
    descriptif: str = ""
    is_active: bool = False
    document_type_id: Optional[int] = None

    @property
    def name(self) -> str:
        return self.title

    @property
    def description(self) -> str:
        return self.descriptif or self.title

    def accepts_type(self, type_id: Optional[int]) -> bool:
        """True if the circuit has no type affinity or its affinity matches."""
        return self.document_type_id is None or self.document_type_id == type_id

    def is_eligible_for(self, type_id: Optional[int]) -> bool:
        return bool(self.is_active) and self.accepts_type(type_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "circuitKey": self.circuit_key,
            "descriptif": self.descriptif,
            "isActive": self.is_active,
            "documentTypeId": self.document_type_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Circuit":
        document_type_id = data.get("documentTypeId", data.get("document_type_id"))
        return cls(
            id=int(data.get("id")),
            title=data.get("title", "") or "",
            circuit_key=data.get("circuitKey", data.get("circuit_key", "")) or "",
            descriptif=data.get("descriptif", "") or "",
            is_active=bool(data.get("isActive", data.get("is_active", False))),
            document_type_id=int(document_type_id) if document_type_id not in (None, "", 0) else None,
        )
