"""Contractor (counterparty) model."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from backoffice.core.database import Base


class Contractor(Base):
    """
    Business counterparty with its legal and banking requisites.

    The same record can appear on a document either as the customer
    (заказчик) or as the contractor (исполнитель).
    """

    __tablename__ = "contractors"

    id = Column(Integer, primary_key=True, index=True)

    # Names
    short_name = Column(String, nullable=False)
    full_name = Column(String, nullable=False)

    # Registration identifiers
    ogrn = Column(String, nullable=False)
    inn = Column(String, unique=True, index=True, nullable=False)
    kpp = Column(String)
    okpo = Column(String)
    okved = Column(String)

    # Addresses
    legal_address = Column(String, nullable=False)
    actual_address = Column(String)

    # Banking details
    checking_account = Column(String)  # расчетный счет
    bank_name = Column(String)
    correspondent_account = Column(String)  # корр. счет
    bik = Column(String)

    # Contacts
    director = Column(String)  # full name, "Фамилия Имя Отчество"
    phone = Column(String)
    email = Column(String)

    # Metadata
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    creator = relationship("User", back_populates="contractors")
