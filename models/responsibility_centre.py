# -*- coding: utf-8 -*-
"""
Responsibility centre and operating-user profile models.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ResponsibilityCentre:
    """Organizational unit a document is attributed to."""

    id: int
    code: str = ""
    descr: str = ""

    @property
    def display_name(self) -> str:
        return self.descr or self.code

    def to_dict(self) -> dict:
        return {"id": self.id, "code": self.code, "descr": self.descr}

    @classmethod
    def from_dict(cls, data: dict) -> "ResponsibilityCentre":
        return cls(
            id=int(data.get("id")),
            code=data.get("code", "") or "",
            descr=data.get("descr", "") or "",
        )


@dataclass
class UserProfile:
    """
    The operating user, passed explicitly into the wizard.

    A user with an assigned responsibility centre always creates documents
    for that centre.
    """

    user_id: Optional[int] = None
    username: str = ""
    responsibility_centre: Optional[ResponsibilityCentre] = None

    @property
    def has_responsibility_centre(self) -> bool:
        return self.responsibility_centre is not None

    @property
    def responsibility_centre_id(self) -> Optional[int]:
        return self.responsibility_centre.id if self.responsibility_centre else None

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """
        Build from the account user-info payload.

        The backend spells the centre key both "responsibilityCentre" and
        "responsibilityCenter".
        """
        centre_data = data.get("responsibilityCentre") or data.get("responsibilityCenter")
        centre = None
        if isinstance(centre_data, dict) and centre_data.get("id") is not None:
            centre = ResponsibilityCentre.from_dict(centre_data)
        user_id = data.get("userId", data.get("id"))
        return cls(
            user_id=int(user_id) if user_id is not None else None,
            username=data.get("username", "") or "",
            responsibility_centre=centre,
        )
