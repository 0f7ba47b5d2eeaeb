"""Document model for generated contracts and shipment papers."""

import enum

from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Float, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from backoffice.core.database import Base


class DocumentType(str, enum.Enum):
    SHIPMENT = "SHIPMENT"
    RENTAL = "RENTAL"


class DocumentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Document(Base):
    """Document record; rendering is delegated to the n8n workflow."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False)  # SHIPMENT, RENTAL

    customer_id = Column(Integer, ForeignKey("contractors.id"), nullable=False, index=True)
    contractor_id = Column(Integer, ForeignKey("contractors.id"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)

    # Rendering workflow tracking
    status = Column(String, nullable=False, default=DocumentStatus.PENDING.value, index=True)
    workflow_response = Column(JSON, nullable=True)  # last callback body, kept verbatim
    document_url = Column(String, nullable=True)

    # Metadata
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    customer = relationship("Contractor", foreign_keys=[customer_id])
    contractor = relationship("Contractor", foreign_keys=[contractor_id])
    creator = relationship("User", back_populates="documents")
