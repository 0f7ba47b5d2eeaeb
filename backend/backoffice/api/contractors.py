"""Contractors API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backoffice.core.database import get_db
from backoffice.core.security import get_current_user, require_admin
from backoffice.models.user import User
from backoffice.schemas.contractor import (
    ContractorCreate,
    ContractorEnvelope,
    ContractorListResponse,
    ContractorUpdate,
)
from backoffice.schemas.user import MessageResponse
from backoffice.services import contractor_service

router = APIRouter()


@router.get("", response_model=ContractorListResponse)
async def list_contractors(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List all contractors."""
    return {"contractors": contractor_service.list_contractors(db)}


@router.get("/{contractor_id}", response_model=ContractorEnvelope)
async def get_contractor(
    contractor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a contractor by ID."""
    return {"contractor": contractor_service.get_contractor(db, contractor_id)}


@router.post("", response_model=ContractorEnvelope, status_code=status.HTTP_201_CREATED)
async def create_contractor(
    contractor_data: ContractorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a new contractor. INN must be unique."""
    contractor = contractor_service.create_contractor(db, contractor_data, current_user)
    return {"contractor": contractor}


@router.put("/{contractor_id}", response_model=ContractorEnvelope)
async def update_contractor(
    contractor_id: int,
    contractor_data: ContractorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Update a contractor (admin only)."""
    contractor = contractor_service.update_contractor(db, contractor_id, contractor_data)
    return {"contractor": contractor}


@router.delete("/{contractor_id}", response_model=MessageResponse)
async def delete_contractor(
    contractor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a contractor that is not used by any document."""
    contractor_service.delete_contractor(db, contractor_id)
    return {"message": "Contractor deleted successfully"}
