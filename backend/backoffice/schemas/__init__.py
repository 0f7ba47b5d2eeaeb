"""Pydantic schemas for request/response validation."""

from backoffice.schemas.user import (
    CamelModel,
    LoginRequest,
    RegisterRequest,
    CreateAdminRequest,
    ProfileUpdate,
    PasswordChange,
    UserUpdate,
    UserResponse,
    AuthResponse,
    UserEnvelope,
    UserListResponse,
    CreateAdminResponse,
    MessageResponse,
)
from backoffice.schemas.contractor import (
    ContractorCreate,
    ContractorUpdate,
    ContractorResponse,
    ContractorEnvelope,
    ContractorListResponse,
)
from backoffice.schemas.document import (
    DocumentCreate,
    DocumentResponse,
    DocumentEnvelope,
    DocumentListResponse,
    DocumentCallback,
    DocumentTypeOption,
    DocumentTypesResponse,
)

__all__ = [
    "CamelModel",
    "LoginRequest",
    "RegisterRequest",
    "CreateAdminRequest",
    "ProfileUpdate",
    "PasswordChange",
    "UserUpdate",
    "UserResponse",
    "AuthResponse",
    "UserEnvelope",
    "UserListResponse",
    "CreateAdminResponse",
    "MessageResponse",
    "ContractorCreate",
    "ContractorUpdate",
    "ContractorResponse",
    "ContractorEnvelope",
    "ContractorListResponse",
    "DocumentCreate",
    "DocumentResponse",
    "DocumentEnvelope",
    "DocumentListResponse",
    "DocumentCallback",
    "DocumentTypeOption",
    "DocumentTypesResponse",
]
