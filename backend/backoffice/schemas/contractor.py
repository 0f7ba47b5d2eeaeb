"""Contractor schemas for request/response validation."""

from typing import Optional, List
from datetime import datetime

from backoffice.schemas.user import CamelModel


class ContractorBase(CamelModel):
    """Requisites shared by create, update and response payloads."""
    short_name: Optional[str] = None
    full_name: Optional[str] = None
    ogrn: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    okpo: Optional[str] = None
    okved: Optional[str] = None
    legal_address: Optional[str] = None
    actual_address: Optional[str] = None
    checking_account: Optional[str] = None
    bank_name: Optional[str] = None
    correspondent_account: Optional[str] = None
    bik: Optional[str] = None
    director: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ContractorCreate(ContractorBase):
    """shortName, fullName, ogrn, inn and legalAddress are required by the service."""
    pass


class ContractorUpdate(ContractorBase):
    """Partial update: only fields present in the body are written."""
    pass


class CreatorSummary(CamelModel):
    name: Optional[str] = None


class ContractorResponse(ContractorBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorSummary] = None


class ContractorEnvelope(CamelModel):
    contractor: ContractorResponse


class ContractorListResponse(CamelModel):
    contractors: List[ContractorResponse]
