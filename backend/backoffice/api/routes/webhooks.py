"""
Webhook endpoints for external services.

The n8n rendering workflow calls back here once a document has been
rendered (or has failed to render).
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.database import get_db
from backoffice.core.exceptions import UnauthorizedError
from backoffice.schemas.document import DocumentCallback
from backoffice.schemas.user import MessageResponse
from backoffice.services import document_workflow

logger = logging.getLogger(__name__)

router = APIRouter()


def verify_callback_secret(x_webhook_secret: Optional[str] = Header(None)) -> None:
    """
    Check the shared secret when WEBHOOK_CALLBACK_SECRET is configured.

    Without it the endpoint is open, as the workflow cannot sign requests.
    """
    expected = settings.WEBHOOK_CALLBACK_SECRET
    if not expected:
        return
    # Header values arrive as latin-1 decoded raw bytes
    if not x_webhook_secret or not secrets.compare_digest(
        x_webhook_secret.encode("latin-1"), expected.encode("utf-8")
    ):
        logger.warning("Render callback rejected: bad or missing webhook secret")
        raise UnauthorizedError("callback_forbidden")


@router.post(
    "/{document_id}",
    response_model=MessageResponse,
    dependencies=[Depends(verify_callback_secret)],
)
async def render_callback(
    document_id: int,
    callback: DocumentCallback,
    db: Session = Depends(get_db),
):
    """
    Handle the rendering workflow's report.

    Payload structure:
    {
      "status": "success" | "<anything else>",
      "documentUrl": "https://...",
      "error": "..."
    }
    """
    logger.info(f"Received render callback for document {document_id}: status={callback.status!r}")
    document_workflow.apply_callback(db, document_id, callback)
    return {"message": "Document status updated successfully"}
