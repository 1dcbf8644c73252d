"""Registration, login and bearer session management."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from areca.core.config import settings
from areca.core.errors import AuthenticationAppError, ConflictAppError
from areca.core.logging import fingerprint
from areca.core.security import (
    generate_session_token,
    hash_password,
    hash_session_token,
    verify_password,
)
from areca.db.base import utcnow
from areca.db.models import LoginSession, User
from areca.schemas.user import RegisterRequest
from areca.services.base import storage_errors

logger = logging.getLogger(__name__)


class AuthService:
    """Issues and resolves opaque bearer sessions.

    Tokens are returned to the client once; only their SHA-256 is stored.
    """

    def __init__(
        self,
        db: Session,
        *,
        session_ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.session_ttl = session_ttl or timedelta(hours=settings.auth.session_ttl_hours)
        self._clock = clock

    def register(self, payload: RegisterRequest) -> tuple[User, str]:
        """Create a user and open a first session.

        Raises:
            ConflictAppError: If the email or username is already taken.
        """
        email = payload.email.lower()
        with storage_errors(self.db, "Failed to register user", operation="auth.register"):
            existing = self.db.scalar(
                select(User).where(or_(User.email == email, User.username == payload.username))
            )
            if existing is not None:
                logger.info("auth.register_conflict", extra={"email_hash": fingerprint(email)})
                raise ConflictAppError(
                    code="user_exists",
                    message="User with this email or username already exists",
                )

            user = User(
                email=email,
                username=payload.username,
                password_hash=hash_password(payload.password),
                first_name=payload.first_name,
                last_name=payload.last_name,
            )
            self.db.add(user)
            try:
                self.db.flush()
            except IntegrityError as exc:
                self.db.rollback()
                raise ConflictAppError(
                    code="user_exists",
                    message="User with this email or username already exists",
                ) from exc

            token = self._open_session(user)
            self.db.commit()

        logger.info("auth.registered", extra={"user_id": user.id})
        return user, token

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Verify credentials and open a new session.

        Raises:
            AuthenticationAppError: Unknown email, wrong password or a
                deactivated account; the message does not say which.
        """
        email = email.lower()
        with storage_errors(self.db, "Login failed", operation="auth.login"):
            user = self.db.scalar(select(User).where(User.email == email))

            if user is None or not verify_password(password, user.password_hash):
                logger.warning("auth.login_failed", extra={"email_hash": fingerprint(email)})
                raise AuthenticationAppError(
                    code="invalid_credentials", message="Invalid email or password"
                )
            if not user.is_active:
                logger.warning("auth.login_inactive", extra={"user_id": user.id})
                raise AuthenticationAppError(
                    code="account_deactivated", message="Account is deactivated"
                )

            token = self._open_session(user)
            self.db.commit()

        logger.info("auth.login_succeeded", extra={"user_id": user.id})
        return user, token

    def logout(self, token: str) -> None:
        with storage_errors(self.db, "Logout failed", operation="auth.logout"):
            self.db.execute(
                delete(LoginSession).where(LoginSession.token_hash == hash_session_token(token))
            )
            self.db.commit()

    def authenticate(self, token: str) -> User:
        """Resolve a bearer token to its active user.

        Expired sessions are deleted on sight.

        Raises:
            AuthenticationAppError: Unknown or expired token, or inactive user.
        """
        with storage_errors(self.db, "Authentication failed", operation="auth.authenticate"):
            session = self.db.scalar(
                select(LoginSession).where(LoginSession.token_hash == hash_session_token(token))
            )
            if session is None:
                raise AuthenticationAppError(code="invalid_token", message="Invalid or expired token")

            if session.expires_at <= self._clock():
                self.db.delete(session)
                self.db.commit()
                logger.info("auth.session_expired", extra={"user_id": session.user_id})
                raise AuthenticationAppError(code="invalid_token", message="Invalid or expired token")

            user = session.user
            if not user.is_active:
                raise AuthenticationAppError(
                    code="account_deactivated", message="Account is deactivated"
                )
        return user

    def _open_session(self, user: User) -> str:
        token = generate_session_token()
        self.db.add(
            LoginSession(
                user_id=user.id,
                token_hash=hash_session_token(token),
                expires_at=self._clock() + self.session_ttl,
            )
        )
        return token
