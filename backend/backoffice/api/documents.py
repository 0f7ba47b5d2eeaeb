"""Documents API routes."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from backoffice.core.database import get_db
from backoffice.core.security import get_current_user
from backoffice.models.user import User
from backoffice.schemas.document import (
    DocumentCreate,
    DocumentEnvelope,
    DocumentListResponse,
    DocumentTypesResponse,
)
from backoffice.schemas.user import MessageResponse
from backoffice.services import document_workflow
from backoffice.services.render_webhook import RenderWebhookClient, get_render_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List all documents, newest first."""
    return {"documents": document_workflow.list_documents(db)}


@router.get("/meta/types", response_model=DocumentTypesResponse)
async def get_document_types(current_user: User = Depends(get_current_user)):
    """Document types with their display labels."""
    return {"types": document_workflow.document_types()}


@router.get("/{document_id}", response_model=DocumentEnvelope)
async def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a specific document."""
    return {"document": document_workflow.get_document(db, document_id)}


@router.post("", response_model=DocumentEnvelope, status_code=status.HTTP_201_CREATED)
def create_document(
    document_data: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    render_client: RenderWebhookClient = Depends(get_render_client),
):
    """
    Create a document and send it to the rendering workflow.

    Always answers 201 once the record exists; a failed dispatch shows up
    as ``status: FAILED`` on the returned document, not as an error.
    """
    logger.info(
        f"Document create request - user: {current_user.id}, type: {document_data.type}, "
        f"customer: {document_data.customer_id}, contractor: {document_data.contractor_id}"
    )
    document = document_workflow.create_document(db, document_data, current_user, render_client)
    return {"document": document}


@router.get("/{document_id}/download")
async def download_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Redirect to the rendered file of a COMPLETED document."""
    url = document_workflow.get_download_url(db, document_id)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a document; only its creator may do so."""
    document_workflow.delete_document(db, document_id, current_user)
    return {"message": "Document deleted successfully"}
