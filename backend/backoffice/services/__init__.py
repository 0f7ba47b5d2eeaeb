"""
Services package - business logic and integrations.

Structure:
- backoffice.services.user_service - users, login, admin management
- backoffice.services.contractor_service - contractor registry
- backoffice.services.document_workflow - document lifecycle and status machine
- backoffice.services.render_webhook - outbound n8n rendering webhook
- backoffice.services.formatting - name/date strings for the templates
"""

from backoffice.services.formatting import (
    calculate_contract_end_date,
    format_director_name,
)
from backoffice.services.render_webhook import (
    RenderWebhookClient,
    build_render_payload,
    get_render_client,
)

__all__ = [
    "calculate_contract_end_date",
    "format_director_name",
    "RenderWebhookClient",
    "build_render_payload",
    "get_render_client",
]
