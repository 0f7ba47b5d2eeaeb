"""Database models."""

from backoffice.models.user import User, UserRole
from backoffice.models.contractor import Contractor
from backoffice.models.document import Document, DocumentStatus, DocumentType

__all__ = ["User", "UserRole", "Contractor", "Document", "DocumentStatus", "DocumentType"]
