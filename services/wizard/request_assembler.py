# -*- coding: utf-8 -*-
"""
Request Assembler - builds the document-creation command from FormState.

Payload keys follow the backend CreateDocumentRequest contract. Optional
fields that were never set are sent as explicit nulls so the backend can tell
"not provided" apart from "provided empty".
"""

from typing import Any, Dict

from models import TierType
from services.exceptions import AssemblyException
from ui.wizards.create_document.document_context import DocumentFormState, ResolvedOptions
from utils.datetime_utils import to_date_isoformat
from utils.logger import get_logger

logger = get_logger(__name__)


def _text_or_none(value: str):
    if value is None:
        return None
    text = value.strip()
    return text or None


class RequestAssembler:
    """Turns a validated DocumentFormState into a create-document payload."""

    def assemble(self, form: DocumentFormState, options: ResolvedOptions) -> Dict[str, Any]:
        """
        Build the payload.

        Raises:
            AssemblyException: if the form is internally inconsistent
        """
        if form.responsibility_centre_id is None:
            raise AssemblyException("Responsibility centre is missing", field="responsibility_centre_id")
        if form.selected_type_id is None:
            raise AssemblyException("Document type is missing", field="selected_type_id")
        if form.selected_sub_type_id is None:
            raise AssemblyException("Series is missing", field="selected_sub_type_id")

        doc_date = to_date_isoformat(form.doc_date)
        if doc_date is None:
            raise AssemblyException("Document date is not a valid date", field="doc_date")

        tier_type = options.tier_type_for(form.selected_type_id)
        payload: Dict[str, Any] = {
            "responsibilityCentreId": form.responsibility_centre_id,
            "typeId": form.selected_type_id,
            "subTypeId": form.selected_sub_type_id,
            "title": form.title.strip(),
            "docDate": doc_date,
            "comptableDate": to_date_isoformat(form.comptable_date),
            "content": form.content,
            "circuitId": form.circuit_id,
        }
        payload.update(self._alias_fields(form))
        payload.update(self._customer_vendor_fields(form, tier_type))

        logger.debug(
            f"Assembled create request for {form.reference_number}: type={payload['typeId']} "
            f"subType={payload['subTypeId']} circuit={payload['circuitId']} "
            f"external={form.is_external}"
        )
        return payload

    @staticmethod
    def _alias_fields(form: DocumentFormState) -> Dict[str, Any]:
        """External documents carry the external reference and a blank alias."""
        if form.is_external:
            reference = _text_or_none(form.external_reference)
            if reference is None:
                raise AssemblyException("External reference is missing", field="external_reference")
            return {"documentAlias": "", "documentExterne": reference}
        return {"documentAlias": form.document_alias.strip(), "documentExterne": None}

    @staticmethod
    def _customer_vendor_fields(form: DocumentFormState, tier_type: TierType) -> Dict[str, Any]:
        empty = {
            "customerVendorCode": None,
            "customerVendorName": None,
            "customerVendorAddress": None,
            "customerVendorCity": None,
            "customerVendorCountry": None,
        }
        if not tier_type.requires_customer_vendor:
            return empty

        entity = form.selected_customer_vendor
        if entity is None:
            raise AssemblyException(f"{tier_type.label.capitalize()} is missing", field="selected_customer_vendor")

        code = entity.code_for(tier_type)
        if not code:
            raise AssemblyException(f"{tier_type.label.capitalize()} has no code", field="selected_customer_vendor")

        name = _text_or_none(form.customer_vendor_name)
        if name is None:
            raise AssemblyException(f"{tier_type.label.capitalize()} name is missing", field="customer_vendor_name")

        return {
            "customerVendorCode": code,
            "customerVendorName": name,
            "customerVendorAddress": _text_or_none(form.customer_vendor_address),
            "customerVendorCity": _text_or_none(form.customer_vendor_city),
            "customerVendorCountry": _text_or_none(form.customer_vendor_country),
        }
