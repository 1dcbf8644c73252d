"""Profile, password and account management for the current user."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from sqlalchemy import delete
from sqlalchemy.orm import Session

from areca.core.config import settings
from areca.core.errors import StorageAppError, ValidationAppError
from areca.core.security import hash_password, verify_password
from areca.db.models import LoginSession, User
from areca.schemas.user import ProfileUpdate
from areca.services.base import storage_errors
from areca.utils.file_validators import ImageType

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, user: User, *, upload_dir: str | Path | None = None) -> None:
        self.db = db
        self.user = user
        self.upload_dir = Path(upload_dir or settings.app.upload_dir)

    def update_profile(self, payload: ProfileUpdate) -> User:
        changes = payload.model_dump(exclude_unset=True)
        with storage_errors(self.db, "Failed to update profile", operation="user.update_profile"):
            for field, value in changes.items():
                setattr(self.user, field, value)
            self.db.commit()
        logger.info("user.profile_updated", extra={"user_id": self.user.id, "fields": sorted(changes)})
        return self.user

    def change_password(self, current_password: str, new_password: str) -> None:
        """Replace the password and revoke every session of the user.

        Raises:
            ValidationAppError: If ``current_password`` does not match.
        """
        if not verify_password(current_password, self.user.password_hash):
            logger.warning("user.password_change_rejected", extra={"user_id": self.user.id})
            raise ValidationAppError(
                code="invalid_password", message="Current password is incorrect"
            )

        with storage_errors(self.db, "Failed to change password", operation="user.change_password"):
            self.user.password_hash = hash_password(new_password)
            self.db.execute(delete(LoginSession).where(LoginSession.user_id == self.user.id))
            self.db.commit()
        logger.info("user.password_changed", extra={"user_id": self.user.id})

    def delete_account(self, password: str) -> None:
        """Delete the user and everything the user owns.

        Raises:
            ValidationAppError: If ``password`` does not match.
        """
        if not verify_password(password, self.user.password_hash):
            logger.warning("user.delete_rejected", extra={"user_id": self.user.id})
            raise ValidationAppError(code="invalid_password", message="Incorrect password")

        user_id = self.user.id
        avatar = self.user.avatar
        with storage_errors(self.db, "Failed to delete account", operation="user.delete_account"):
            self.db.delete(self.user)
            self.db.commit()
        self._remove_file(avatar)
        logger.info("user.account_deleted", extra={"user_id": user_id})

    def set_avatar(self, content: bytes, image_type: ImageType) -> User:
        """Store an already validated image and point the user's avatar at it.

        The previous avatar file, if any, is removed afterwards.
        """
        target_dir = self.upload_dir / "avatars"
        target_dir.mkdir(parents=True, exist_ok=True)
        digest = hashlib.sha256(content).hexdigest()[:12]
        filename = f"{self.user.id}-{digest}.{image_type.value}"
        (target_dir / filename).write_bytes(content)

        previous = self.user.avatar
        relative = f"avatars/{filename}"
        try:
            with storage_errors(self.db, "Failed to upload avatar", operation="user.set_avatar"):
                self.user.avatar = relative
                self.db.commit()
        except StorageAppError:
            if relative != previous:
                self._remove_file(relative)
            raise

        if previous and previous != relative:
            self._remove_file(previous)
        logger.info(
            "user.avatar_updated",
            extra={"user_id": self.user.id, "bytes": len(content), "image_type": image_type.value},
        )
        return self.user

    def remove_avatar(self) -> User:
        previous = self.user.avatar
        with storage_errors(self.db, "Failed to delete avatar", operation="user.remove_avatar"):
            self.user.avatar = None
            self.db.commit()
        self._remove_file(previous)
        return self.user

    def _remove_file(self, relative: str | None) -> None:
        if not relative:
            return
        path = (self.upload_dir / relative).resolve()
        if self.upload_dir.resolve() not in path.parents:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("user.avatar_cleanup_failed", extra={"error_type": type(exc).__name__})
