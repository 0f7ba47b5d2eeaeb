"""
Render webhook client - sends document data to the n8n rendering workflow.

The workflow fills the contract template and later reports back through
``POST /api/documents/webhook/{id}``.
"""

import logging
from typing import Any, Dict, Optional

import requests

from backoffice.core.config import settings
from backoffice.core.exceptions import WebhookDispatchError
from backoffice.models.contractor import Contractor
from backoffice.models.document import Document
from backoffice.services.formatting import (
    DOCUMENT_TYPE_LABELS,
    NOT_SPECIFIED,
    calculate_contract_end_date,
    format_director_name,
    format_ru_date,
)

logger = logging.getLogger(__name__)


def build_render_payload(
    document: Document,
    customer: Contractor,
    contractor: Contractor,
) -> Dict[str, Any]:
    """
    Flatten a document and both parties into the template field set.

    Keys follow the template placeholders: ``*_zakazchik`` describe the
    customer, ``*_ispolnitel`` the contractor.
    """
    doc_date = format_ru_date(document.date)

    return {
        "documentId": document.id,
        "type_doc": DOCUMENT_TYPE_LABELS.get(document.type, DOCUMENT_TYPE_LABELS["RENTAL"]),
        "dogovor_number": doc_date,
        "date": doc_date,
        "ispolnitel": contractor.full_name or contractor.short_name,
        "director_ispolnitel": contractor.director or NOT_SPECIFIED,
        "zakazchik": customer.full_name or customer.short_name,
        "director_zakazchik": customer.director or NOT_SPECIFIED,
        "uradress_zakazchik": customer.legal_address,
        "mailadress_zakazchik": customer.actual_address or customer.legal_address,
        "inn_zakazchik": customer.inn,
        "kpp_zakazchik": customer.kpp or "",
        "ogrn_zakazchik": customer.ogrn or "",
        "rs_zakazchik": customer.checking_account or "",
        "bank_zakazchik": customer.bank_name or "",
        "ks_zakazchik": customer.correspondent_account or "",
        "bik_zakazchik": customer.bik or "",
        "email_zakazchik": customer.email or "",
        "phone_zakazchik": customer.phone or "",
        "uradress_ispolnitel": contractor.legal_address,
        "inn_ispolnitel": contractor.inn,
        "kpp_ispolnitel": contractor.kpp or "",
        "rs_ispolnitel": contractor.checking_account or "",
        "bank_ispolnitel": contractor.bank_name or "",
        "bik_ispolnitel": contractor.bik or "",
        "ks_ispolnitel": contractor.correspondent_account or "",
        "ogrn_ispolnitel": contractor.ogrn or "",
        "okpo_ispolnitel": contractor.okpo or "",
        "phone_ispolnitel": contractor.phone or "",
        "email_ispolnitel": contractor.email or "",
        "colontitul_ispolnitel": format_director_name(contractor.director),
        "colontitul_zakazchik": format_director_name(customer.director),
        "name_doc": f"{customer.short_name}-{contractor.short_name} {doc_date}",
        "srok_dogovora": calculate_contract_end_date(document.date),
    }


class RenderWebhookClient:
    """Client for the document rendering webhook."""

    def __init__(self, url: str, timeout: Optional[float] = None):
        self.url = url
        self.timeout = timeout

    def dispatch(self, payload: Dict[str, Any]) -> requests.Response:
        """
        POST the payload once. No retry.

        Raises:
            WebhookDispatchError: On network failure or a non-2xx response
        """
        logger.info(f"Dispatching document {payload.get('documentId')} to render webhook")

        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise WebhookDispatchError(f"Render webhook unreachable: {e}") from e

        if not response.ok:
            raise WebhookDispatchError(
                f"Render webhook responded with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(
            f"Render webhook accepted document {payload.get('documentId')} "
            f"(HTTP {response.status_code})"
        )
        return response


# Singleton instance
_render_client: Optional[RenderWebhookClient] = None


def get_render_client() -> RenderWebhookClient:
    """Get or create the render webhook client singleton."""
    global _render_client
    if _render_client is None:
        _render_client = RenderWebhookClient(
            url=settings.N8N_WEBHOOK_URL,
            timeout=settings.WEBHOOK_TIMEOUT,
        )
    return _render_client
