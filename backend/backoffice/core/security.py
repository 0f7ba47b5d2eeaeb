"""
Password hashing, signed access tokens and the FastAPI auth gate.

Tokens are stateless: the server keeps no session table, a token is
accepted purely on its signature and expiry. The user row is still loaded
on every request so that deleted users and role changes take effect
immediately.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.database import get_db
from backoffice.core.exceptions import ForbiddenError, UnauthorizedError
from backoffice.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt (cost 10)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash has an unexpected format")
        return False


class Authenticator:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, claims: Dict[str, Any]) -> str:
        """
        Sign ``claims`` into a token valid for ``lifetime``.

        Args:
            claims: Identity claims, e.g. ``{"userId": 1, "role": "ADMIN"}``

        Returns:
            Encoded token string
        """
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + self.lifetime
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            UnauthorizedError: If the token is malformed, forged or expired
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("invalid_token", reason="expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("invalid_token", reason="invalid")

    def issue_for(self, user: User) -> str:
        return self.issue({"userId": user.id, "role": user.role})


_authenticator: Optional[Authenticator] = None


def get_authenticator() -> Authenticator:
    """Get or create the process-wide authenticator."""
    global _authenticator
    if _authenticator is None:
        _authenticator = Authenticator(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
    return _authenticator


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    authenticator: Authenticator = Depends(get_authenticator),
) -> User:
    """
    Resolve the bearer token of the request to a user.

    This is the main dependency to use for protected routes.

    Raises:
        UnauthorizedError: Missing token, invalid or expired token, or the
            user it names no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("not_authenticated")

    claims = authenticator.verify(credentials.credentials)

    user_id = claims.get("userId")
    user = db.query(User).filter(User.id == user_id).first() if user_id is not None else None
    if not user:
        logger.debug(f"Token for unknown user id {user_id}")
        raise UnauthorizedError("invalid_token", reason="unknown_user")

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Admin-only guard; runs after authentication."""
    if not current_user.is_admin:
        logger.info(f"User {current_user.id} denied admin-only access")
        raise ForbiddenError("admin_required")
    return current_user
