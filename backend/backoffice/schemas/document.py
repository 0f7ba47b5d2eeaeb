"""Document schemas for request/response validation."""

from pydantic import ConfigDict
from typing import Optional, List, Union, Any
from datetime import datetime, date as date_type

from backoffice.schemas.contractor import CreatorSummary
from backoffice.schemas.user import CamelModel


class DocumentCreate(CamelModel):
    """Schema for document creation; amount may arrive as a string."""
    type: Optional[str] = None
    customer_id: Optional[int] = None
    contractor_id: Optional[int] = None
    amount: Optional[Union[float, str]] = None
    date: Optional[str] = None


class PartySummary(CamelModel):
    """Contractor fields embedded in a document."""
    id: int
    short_name: Optional[str] = None
    full_name: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    ogrn: Optional[str] = None
    okpo: Optional[str] = None
    legal_address: Optional[str] = None
    actual_address: Optional[str] = None
    checking_account: Optional[str] = None
    bank_name: Optional[str] = None
    correspondent_account: Optional[str] = None
    bik: Optional[str] = None
    director: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class DocumentResponse(CamelModel):
    """Schema for document response."""
    id: int
    type: str
    customer_id: int
    contractor_id: int
    amount: float
    date: date_type
    status: str
    document_url: Optional[str] = None
    workflow_response: Optional[Any] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    customer: Optional[PartySummary] = None
    contractor: Optional[PartySummary] = None
    creator: Optional[CreatorSummary] = None


class DocumentEnvelope(CamelModel):
    document: DocumentResponse


class DocumentListResponse(CamelModel):
    documents: List[DocumentResponse]


class DocumentCallback(CamelModel):
    """
    Body posted back by the rendering workflow.

    Only ``status`` drives the transition ("success" completes the
    document, anything else fails it). Unknown keys are kept so the whole
    body can be stored as the workflow response.
    """
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    document_url: Optional[str] = None
    error: Optional[str] = None


class DocumentTypeOption(CamelModel):
    value: str
    label: str


class DocumentTypesResponse(CamelModel):
    types: List[DocumentTypeOption]
