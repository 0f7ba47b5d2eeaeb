"""Auth API routes: login, registration and user management."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backoffice.core.database import get_db
from backoffice.core.exceptions import UnauthorizedError, ValidationError
from backoffice.core.security import (
    Authenticator,
    get_authenticator,
    get_current_user,
    require_admin,
)
from backoffice.models.user import User
from backoffice.schemas.user import (
    AuthResponse,
    CreateAdminRequest,
    CreateAdminResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserEnvelope,
    UserListResponse,
    UserUpdate,
)
from backoffice.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    db: Session = Depends(get_db),
    authenticator: Authenticator = Depends(get_authenticator),
    current_user: User = Depends(require_admin),
):
    """Register a new user (admin only)."""
    user = user_service.register_user(
        db,
        email=user_data.email,
        name=user_data.name,
        password=user_data.password,
        role=user_data.role,
    )
    logger.info(f"Admin {current_user.id} registered user {user.id}")
    return {"user": user, "token": authenticator.issue_for(user)}


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Login with email and password; returns the user and a 24h token."""
    if not login_data.email or not login_data.password:
        raise ValidationError("login_fields_required")

    user = user_service.authenticate(db, login_data.email, login_data.password)
    if not user:
        raise UnauthorizedError("invalid_credentials")

    return {"user": user, "token": authenticator.issue_for(user)}


@router.post("/create-admin", response_model=CreateAdminResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    admin_data: CreateAdminRequest,
    db: Session = Depends(get_db),
):
    """
    Create the first administrator.

    No token required; only works while no admin exists.
    """
    admin = user_service.create_first_admin(
        db, email=admin_data.email, name=admin_data.name, password=admin_data.password
    )
    return {"message": "Admin user created successfully", "user": admin}


@router.get("/me", response_model=UserEnvelope)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return {"user": current_user}


@router.get("/users", response_model=UserListResponse)
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """List all users (admin only)."""
    return {"users": user_service.list_users(db)}


@router.get("/users/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Get a single user (admin only)."""
    return {"user": user_service.get_user(db, user_id)}


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update the current user's name and email."""
    user = user_service.update_profile(db, current_user, name=profile.name, email=profile.email)
    return {"user": user}


@router.put("/password", response_model=MessageResponse)
async def change_password(
    passwords: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change the current user's password."""
    user_service.change_password(
        db,
        current_user,
        current_password=passwords.current_password,
        new_password=passwords.new_password,
    )
    return {"message": "Password updated successfully"}


@router.put("/users/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Update any user's name, email and role (admin only)."""
    user = user_service.update_user(
        db, user_id, name=user_data.name, email=user_data.email, role=user_data.role
    )
    return {"user": user}


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete a user (admin only, never the caller's own account)."""
    user_service.delete_user(db, user_id, acting_user=current_user)
    return {"message": "User deleted successfully"}
