"""
Document workflow: creation, rendering dispatch and the status machine.

    PENDING ──dispatch ok──▶ PROCESSING ──callback success──▶ COMPLETED
       │                          │
       │                          └──────callback other─────▶ FAILED
       ├──dispatch failed──────────────────────────────────▶ FAILED
       └──callback (arrived before the dispatch result)────▶ COMPLETED | FAILED

The dispatch result and the callback are two independent triggers on the
same row. Transitions only move forward, so whichever arrives second
cannot undo a terminal status.
"""

import logging
import math
from typing import Any, Dict, List

from sqlalchemy.orm import Session, joinedload

from backoffice.core.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    WebhookDispatchError,
)
from backoffice.models.contractor import Contractor
from backoffice.models.document import Document, DocumentStatus, DocumentType
from backoffice.models.user import User
from backoffice.schemas.document import DocumentCallback, DocumentCreate
from backoffice.services.formatting import DOCUMENT_TYPE_LABELS, parse_date
from backoffice.services.render_webhook import RenderWebhookClient, build_render_payload

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    DocumentStatus.PENDING.value: frozenset({
        DocumentStatus.PROCESSING.value,
        DocumentStatus.COMPLETED.value,
        DocumentStatus.FAILED.value,
    }),
    DocumentStatus.PROCESSING.value: frozenset({
        DocumentStatus.COMPLETED.value,
        DocumentStatus.FAILED.value,
    }),
    DocumentStatus.COMPLETED.value: frozenset(),
    DocumentStatus.FAILED.value: frozenset(),
}

CALLBACK_SUCCESS = "success"


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _with_relations(query):
    return query.options(
        joinedload(Document.customer),
        joinedload(Document.contractor),
        joinedload(Document.creator),
    )


def list_documents(db: Session) -> List[Document]:
    """All documents, newest first."""
    return _with_relations(db.query(Document)).order_by(
        Document.created_at.desc(), Document.id.desc()
    ).all()


def get_document(db: Session, document_id: int) -> Document:
    document = _with_relations(db.query(Document)).filter(Document.id == document_id).first()
    if not document:
        raise NotFoundError("document_not_found", document_id=document_id)
    return document


def _validate_create(data: DocumentCreate):
    if (
        not data.type
        or not data.customer_id
        or not data.contractor_id
        or data.amount in (None, "")
        or not data.date
    ):
        raise ValidationError("document_fields_required")

    if data.type not in (DocumentType.SHIPMENT.value, DocumentType.RENTAL.value):
        raise ValidationError("invalid_document_type")

    try:
        amount = float(data.amount)
    except (TypeError, ValueError):
        raise ValidationError("invalid_amount")
    if not math.isfinite(amount):
        raise ValidationError("invalid_amount")

    doc_date = parse_date(data.date)
    if doc_date is None:
        raise ValidationError("invalid_date")

    return amount, doc_date


def transition_status(db: Session, document_id: int, target: str, **values: Any) -> bool:
    """
    Move a document to ``target`` only if its stored status allows it.

    The check and the write are one conditional UPDATE, so a concurrent
    writer that already finalized the row makes this a no-op. Returns True
    when the row was changed. Commits either way.
    """
    sources = [status for status, targets in ALLOWED_TRANSITIONS.items() if target in targets]
    changes = {Document.status: target}
    for field, value in values.items():
        changes[getattr(Document, field)] = value

    updated = (
        db.query(Document)
        .filter(Document.id == document_id, Document.status.in_(sources))
        .update(changes, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def _apply_dispatch_outcome(db: Session, document: Document, target: str):
    # A callback may already have finalized the row while the POST was in flight
    if not transition_status(db, document.id, target):
        logger.info(
            f"Document {document.id}: keeping {document.status}, "
            f"dispatch outcome {target} arrived late"
        )


def create_document(
    db: Session,
    data: DocumentCreate,
    user: User,
    client: RenderWebhookClient,
) -> Document:
    """
    Persist a document and hand it to the rendering workflow.

    The record is committed before the webhook is called and is never
    rolled back: a failed dispatch only marks it FAILED. The caller always
    gets the document back, whatever its resulting status.
    """
    amount, doc_date = _validate_create(data)

    customer = db.query(Contractor).filter(Contractor.id == data.customer_id).first()
    if not customer:
        raise NotFoundError("customer_not_found", contractor_id=data.customer_id)

    contractor = db.query(Contractor).filter(Contractor.id == data.contractor_id).first()
    if not contractor:
        raise NotFoundError("contractor_not_found", contractor_id=data.contractor_id)

    document = Document(
        type=data.type,
        customer_id=customer.id,
        contractor_id=contractor.id,
        amount=amount,
        date=doc_date,
        status=DocumentStatus.PENDING.value,
        created_by=user.id,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info(f"Document {document.id} ({document.type}) created by user {user.id}")

    payload = build_render_payload(document, customer, contractor)
    try:
        client.dispatch(payload)
    except WebhookDispatchError as e:
        logger.error(f"Webhook error for document {document.id}: {e}")
        _apply_dispatch_outcome(db, document, DocumentStatus.FAILED.value)
    else:
        _apply_dispatch_outcome(db, document, DocumentStatus.PROCESSING.value)

    return get_document(db, document.id)


def apply_callback(db: Session, document_id: int, callback: DocumentCallback) -> Document:
    """
    Apply the rendering workflow's report to a document.

    ``status == "success"`` completes the document, any other value fails
    it. Re-delivering the outcome a document already has is a no-op;
    trying to change a finalized document raises InvalidStateError.
    """
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        logger.warning(f"Callback for unknown document {document_id}")
        raise NotFoundError("document_not_found", document_id=document_id)

    target = (
        DocumentStatus.COMPLETED.value
        if callback.status == CALLBACK_SUCCESS
        else DocumentStatus.FAILED.value
    )

    values = {"workflow_response": callback.model_dump(by_alias=True, exclude_none=True)}
    if callback.document_url:
        values["document_url"] = callback.document_url

    if not transition_status(db, document_id, target, **values):
        # Already terminal, possibly finalized by a concurrent request
        if document.status == target and (
            not callback.document_url or callback.document_url == document.document_url
        ):
            logger.info(f"Duplicate callback for document {document_id} ignored")
            return document
        logger.warning(
            f"Rejected callback for document {document_id}: "
            f"{document.status} -> {target}"
        )
        raise InvalidStateError("callback_rejected", current_status=document.status)

    if callback.document_url:
        logger.info(f"Document {document_id} completed with URL: {callback.document_url}")
    if target == DocumentStatus.FAILED.value:
        logger.warning(
            f"Rendering failed for document {document_id}: "
            f"status={callback.status!r} error={callback.error!r}"
        )

    db.refresh(document)
    return document


def get_download_url(db: Session, document_id: int) -> str:
    """URL of the rendered file; only COMPLETED documents have one."""
    document = get_document(db, document_id)

    if document.status != DocumentStatus.COMPLETED.value:
        raise InvalidStateError("document_not_ready", current_status=document.status)
    if not document.document_url:
        raise InvalidStateError("document_url_missing", current_status=document.status)

    return document.document_url


def delete_document(db: Session, document_id: int, user: User) -> None:
    """Only the user who created a document may delete it."""
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise NotFoundError("document_not_found", document_id=document_id)

    if document.created_by != user.id:
        logger.info(f"User {user.id} denied deleting document {document_id}")
        raise ForbiddenError("document_access_denied")

    db.delete(document)
    db.commit()
    logger.info(f"Document {document_id} deleted by user {user.id}")


def document_types() -> List[Dict[str, Any]]:
    return [{"value": value, "label": label} for value, label in DOCUMENT_TYPE_LABELS.items()]
