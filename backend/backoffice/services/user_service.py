"""
User registry: registration, authentication and admin management.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from backoffice.core.security import hash_password, verify_password
from backoffice.models.user import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
VALID_ROLES = (UserRole.ADMIN.value, UserRole.USER.value)


def _normalize_role(role: Optional[str]) -> str:
    if not role:
        return UserRole.USER.value
    role = role.upper()
    if role not in VALID_ROLES:
        raise ValidationError("invalid_role")
    return role


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _commit_or_conflict(db: Session, message: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message)


def register_user(
    db: Session,
    email: Optional[str],
    name: Optional[str],
    password: Optional[str],
    role: Optional[str] = None,
) -> User:
    """
    Create a user.

    Raises:
        ValidationError: Missing field or unknown role
        ConflictError: Email already registered
    """
    if not email or not name or not password:
        raise ValidationError("register_fields_required")
    role = _normalize_role(role)

    if _email_taken(db, email):
        raise ConflictError("email_already_exists")

    user = User(email=email, name=name, password_hash=hash_password(password), role=role)
    db.add(user)
    _commit_or_conflict(db, "email_already_exists")
    db.refresh(user)

    logger.info(f"Registered new user {user.id} (role: {role})")
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user for a matching email/password pair, None otherwise."""
    user = db.query(User).filter(User.email == email).first()

    if not user:
        logger.warning("Authentication failed: unknown email")
        return None

    if not verify_password(password, user.password_hash):
        logger.warning(f"Authentication failed: invalid password for user {user.id}")
        return None

    logger.info(f"User {user.id} authenticated successfully")
    return user


def admin_exists(db: Session) -> bool:
    return db.query(User.id).filter(User.role == UserRole.ADMIN.value).first() is not None


def create_first_admin(db: Session, email: Optional[str], name: Optional[str], password: Optional[str]) -> User:
    """Bootstrap the first administrator; refused once any admin exists."""
    if admin_exists(db):
        raise ValidationError("admin_already_exists")
    return register_user(db, email, name, password, role=UserRole.ADMIN.value)


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("user_not_found", user_id=user_id)
    return user


def update_profile(db: Session, user: User, name: Optional[str], email: Optional[str]) -> User:
    """Self-service name/email change."""
    if not name or not email:
        raise ValidationError("profile_fields_required")
    if _email_taken(db, email, exclude_id=user.id):
        raise ConflictError("email_taken")

    user.name = name
    user.email = email
    _commit_or_conflict(db, "email_taken")
    db.refresh(user)
    logger.info(f"User {user.id} updated their profile")
    return user


def change_password(
    db: Session,
    user: User,
    current_password: Optional[str],
    new_password: Optional[str],
) -> None:
    if not current_password or not new_password:
        raise ValidationError("password_fields_required")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("password_too_short")
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("current_password_incorrect")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"User {user.id} changed their password")


def update_user(
    db: Session,
    user_id: int,
    name: Optional[str],
    email: Optional[str],
    role: Optional[str],
) -> User:
    """Admin edit of any user, including role changes."""
    if not name or not email or not role:
        raise ValidationError("user_fields_required")
    role = _normalize_role(role)

    user = get_user(db, user_id)
    if _email_taken(db, email, exclude_id=user_id):
        raise ConflictError("email_taken")

    user.name = name
    user.email = email
    user.role = role
    _commit_or_conflict(db, "email_taken")
    db.refresh(user)
    logger.info(f"User {user_id} updated (role: {role})")
    return user


def delete_user(db: Session, user_id: int, acting_user: User) -> None:
    """
    Delete a user. Admins cannot delete themselves.

    Contractors and documents the user created are kept; their creator
    reference is cleared.
    """
    if user_id == acting_user.id:
        raise ForbiddenError("cannot_delete_self")

    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by admin {acting_user.id}")
