"""Contractor registry: CRUD over counterparty records."""

import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from backoffice.core.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.models.contractor import Contractor
from backoffice.models.document import Document
from backoffice.models.user import User
from backoffice.schemas.contractor import ContractorCreate, ContractorUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("short_name", "full_name", "ogrn", "inn", "legal_address")


def list_contractors(db: Session) -> List[Contractor]:
    return db.query(Contractor).options(joinedload(Contractor.creator)).order_by(Contractor.id).all()


def get_contractor(db: Session, contractor_id: int) -> Contractor:
    contractor = (
        db.query(Contractor)
        .options(joinedload(Contractor.creator))
        .filter(Contractor.id == contractor_id)
        .first()
    )
    if not contractor:
        raise NotFoundError("contractor_not_found", contractor_id=contractor_id)
    return contractor


def _commit_or_conflict(db: Session, inn: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Duplicate contractor INN {inn}")
        raise ConflictError("contractor_inn_exists", inn=inn)


def create_contractor(db: Session, data: ContractorCreate, user: User) -> Contractor:
    """
    Register a new counterparty.

    Raises:
        ValidationError: A required requisite is missing
        ConflictError: A contractor with the same INN exists
    """
    if any(not getattr(data, field) for field in REQUIRED_FIELDS):
        raise ValidationError("contractor_fields_required")

    # unique index on inn still backs this up for concurrent inserts
    if db.query(Contractor.id).filter(Contractor.inn == data.inn).first():
        raise ConflictError("contractor_inn_exists", inn=data.inn)

    contractor = Contractor(**data.model_dump(), created_by=user.id)
    db.add(contractor)
    _commit_or_conflict(db, data.inn)
    db.refresh(contractor)

    logger.info(f"Contractor {contractor.id} (INN {contractor.inn}) created by user {user.id}")
    return get_contractor(db, contractor.id)


def update_contractor(db: Session, contractor_id: int, data: ContractorUpdate) -> Contractor:
    """Partial update: only fields present in the request body are written."""
    contractor = get_contractor(db, contractor_id)
    changes = data.model_dump(exclude_unset=True)

    for field in REQUIRED_FIELDS:
        if field in changes and not changes[field]:
            raise ValidationError("contractor_fields_required")

    new_inn = changes.get("inn")
    if new_inn and new_inn != contractor.inn:
        duplicate = (
            db.query(Contractor.id)
            .filter(Contractor.inn == new_inn, Contractor.id != contractor_id)
            .first()
        )
        if duplicate:
            raise ConflictError("contractor_inn_exists", inn=new_inn)

    for field, value in changes.items():
        setattr(contractor, field, value)

    _commit_or_conflict(db, contractor.inn)
    logger.info(f"Contractor {contractor_id} updated: {sorted(changes)}")
    return get_contractor(db, contractor_id)


def delete_contractor(db: Session, contractor_id: int) -> None:
    """
    Delete a contractor that no document refers to.

    Raises:
        NotFoundError: Unknown contractor
        ConflictError: The contractor is a party on at least one document
    """
    contractor = db.query(Contractor).filter(Contractor.id == contractor_id).first()
    if not contractor:
        raise NotFoundError("contractor_not_found", contractor_id=contractor_id)

    in_use = (
        db.query(Document.id)
        .filter(or_(Document.customer_id == contractor_id, Document.contractor_id == contractor_id))
        .first()
    )
    if in_use:
        raise ConflictError("contractor_in_use", contractor_id=contractor_id)

    db.delete(contractor)
    db.commit()
    logger.info(f"Contractor {contractor_id} deleted")
