"""User and authentication schemas."""

from pydantic import BaseModel, EmailStr
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON with the front end."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class LoginRequest(CamelModel):
    """Login credentials. Presence is checked by the route, not the schema."""
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(CamelModel):
    """Admin-only user registration."""
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class CreateAdminRequest(CamelModel):
    """First administrator bootstrap."""
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class PasswordChange(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class UserUpdate(CamelModel):
    """Admin edit of another user."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    user: UserResponse
    token: str


class UserEnvelope(CamelModel):
    user: UserResponse


class UserListResponse(CamelModel):
    users: List[UserResponse]


class CreateAdminResponse(CamelModel):
    message: str
    user: UserResponse


class MessageResponse(CamelModel):
    message: str
