# -*- coding: utf-8 -*-
"""
Create-document wizard steps and resolution channels.

The seven steps are statically ordered. The Customer/Vendor step is always
visited but only does work when the selected type's tier requires it.
"""

from typing import Dict, List

from ui.wizards.framework.step_definition import StepDefinition

STEP_RESPONSIBILITY_CENTRE = 1
STEP_DATE = 2
STEP_TYPE = 3
STEP_CUSTOMER_VENDOR = 4
STEP_CONTENT = 5
STEP_CIRCUIT = 6
STEP_REVIEW = 7


class ResolutionChannel:
    """Names of the independent last-request-wins resolution streams."""
    DOCUMENT_TYPES = "document_types"
    TYPES_FOR_DATE = "types_for_date"
    SUBTYPES = "subtypes"
    CIRCUITS = "circuits"
    RESPONSIBILITY_CENTRES = "responsibility_centres"
    CUSTOMER_VENDORS = "customer_vendors"
    SUBMIT = "submit"


# Step that shows a loading indicator (and blocks "Next") while a channel is in flight
CHANNEL_STEPS: Dict[str, int] = {
    ResolutionChannel.RESPONSIBILITY_CENTRES: STEP_RESPONSIBILITY_CENTRE,
    ResolutionChannel.DOCUMENT_TYPES: STEP_TYPE,
    ResolutionChannel.TYPES_FOR_DATE: STEP_TYPE,
    ResolutionChannel.SUBTYPES: STEP_TYPE,
    ResolutionChannel.CUSTOMER_VENDORS: STEP_CUSTOMER_VENDOR,
    ResolutionChannel.CIRCUITS: STEP_CIRCUIT,
    ResolutionChannel.SUBMIT: STEP_REVIEW,
}


def channels_of(step_id: int) -> List[str]:
    return [channel for channel, owner in CHANNEL_STEPS.items() if owner == step_id]


def _requires_customer_vendor(form, options) -> bool:
    return options.tier_type_for(form.selected_type_id).requires_customer_vendor


def _centre_fields(form, options) -> List[str]:
    return [] if form.responsibility_centre_locked else ["responsibility_centre_id"]


def _date_fields(form, options) -> List[str]:
    return ["doc_date"]


def _type_fields(form, options) -> List[str]:
    return ["selected_type_id", "selected_sub_type_id"]


def _customer_vendor_fields(form, options) -> List[str]:
    if not _requires_customer_vendor(form, options):
        return []
    return ["selected_customer_vendor", "customer_vendor_name"]


def _content_fields(form, options) -> List[str]:
    fields = ["content"]
    if form.is_external:
        fields.append("external_reference")
    return fields


DOCUMENT_WIZARD_STEPS: List[StepDefinition] = [
    StepDefinition(
        id=STEP_RESPONSIBILITY_CENTRE,
        key="responsibility_centre",
        title="Responsibility Centre",
        description="Organizational unit the document is attributed to",
        required_fields=_centre_fields,
    ),
    StepDefinition(
        id=STEP_DATE,
        key="date",
        title="Dates",
        description="Document date and optional accounting date",
        required_fields=_date_fields,
    ),
    StepDefinition(
        id=STEP_TYPE,
        key="type",
        title="Document Type",
        description="Document type and series valid on the document date",
        required_fields=_type_fields,
    ),
    StepDefinition(
        id=STEP_CUSTOMER_VENDOR,
        key="customer_vendor",
        title="Customer / Vendor",
        description="Third party required by the document type",
        required_fields=_customer_vendor_fields,
        applicability=_requires_customer_vendor,
    ),
    StepDefinition(
        id=STEP_CONTENT,
        key="content",
        title="Content",
        description="Title, content and external reference",
        required_fields=_content_fields,
    ),
    StepDefinition(
        id=STEP_CIRCUIT,
        key="circuit",
        title="Circuit",
        description="Optional approval workflow",
    ),
    StepDefinition(
        id=STEP_REVIEW,
        key="review",
        title="Review",
        description="Check the document before creating it",
    ),
]
