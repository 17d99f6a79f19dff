"""Profile service: registration, login, profile lookup and profile updates."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DuplicateKeyError, InvalidCodeError, NotFoundError, StorageError, ValidationFailed
from app.models.user import User, utcnow
from app.repositories.user_repository import UserRepository
from app.schemas.user import RegisterResponse
from app.services.code_issuer import CodeIssuer
from app.services.email_service import EmailService
from app.services.image_storage import ImageStorage, ImageUpload

LOGGER = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User registered. Check your email for your access code."
DEV_NOTE = "RESEND_API_KEY not set - code shown for development only"


def normalize_code(code: str) -> str:
    """Codes are matched without surrounding whitespace on every operation."""
    return (code or "").strip()


class ProfileService:
    def __init__(
        self,
        user_repository: UserRepository,
        code_issuer: CodeIssuer,
        email_service: EmailService,
        image_storage: ImageStorage,
        code_issue_attempts: int = 3,
    ) -> None:
        self.user_repository = user_repository
        self.code_issuer = code_issuer
        self.email_service = email_service
        self.image_storage = image_storage
        self.code_issue_attempts = code_issue_attempts

    def register(self, db: Session, email: str) -> RegisterResponse:
        email = (email or "").strip()
        if not email:
            raise ValidationFailed("Email is required", code="email_required")
        if self.user_repository.get_by_email(db, email) is not None:
            raise ConflictError("Email is already registered")

        user = self._insert_with_fresh_code(db, email)
        LOGGER.info("✅ User created with ID: %s", user.id)

        if self.email_service.send_access_code(email, user.code):
            LOGGER.info("✅ Code %s delivered to %s", user.code, email)
        else:
            LOGGER.error("❌ Code %s could not be delivered to %s; registration kept", user.code, email)

        if self.email_service.is_configured:
            return RegisterResponse(message=REGISTERED_MESSAGE)
        return RegisterResponse(message=REGISTERED_MESSAGE, dev_code=user.code, dev_note=DEV_NOTE)

    def _insert_with_fresh_code(self, db: Session, email: str) -> User:
        for attempt in range(1, self.code_issue_attempts + 1):
            code = self.code_issuer.issue(db)
            now = utcnow()
            user = User(email=email, code=code, name="", last_name="", image_url="", created_at=now, updated_at=now)
            try:
                self.user_repository.insert(db, user)
                return user
            except DuplicateKeyError:
                if self.user_repository.get_by_email(db, email) is not None:
                    raise ConflictError("Email is already registered")
                LOGGER.warning("Code %s already taken (attempt %d/%d), issuing another", code, attempt, self.code_issue_attempts)
        raise StorageError("Could not issue a unique access code")

    def login(self, db: Session, code: str) -> User:
        code = normalize_code(code)
        if not code:
            raise ValidationFailed("Code is required", code="code_required")
        user = self.user_repository.get_by_code(db, code)
        if user is None:
            raise InvalidCodeError("Invalid code")
        return user

    def get_profile(self, db: Session, code: str) -> User:
        code = normalize_code(code)
        user = self.user_repository.get_by_code(db, code)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        db: Session,
        code: str,
        name: str = "",
        last_name: str = "",
        image: Optional[ImageUpload] = None,
    ) -> User:
        """Overwrite name and last name, optionally replacing the profile image.

        Absent text fields arrive as empty strings and clear the stored value.
        """
        code = normalize_code(code)
        current = self.user_repository.get_by_code(db, code)
        if current is None:
            raise NotFoundError("User not found")
        previous_image_url = current.image_url

        fields: Dict[str, Any] = {"name": name, "last_name": last_name, "updated_at": utcnow()}
        if image is not None:
            fields["image_url"] = self.image_storage.save(code, image)

        if self.user_repository.update_fields(db, code, fields) == 0:
            raise NotFoundError("User not found")

        new_image_url = fields.get("image_url")
        if new_image_url and previous_image_url and previous_image_url != new_image_url:
            self.image_storage.discard(previous_image_url)

        updated = self.user_repository.get_by_code(db, code)
        if updated is None:
            raise StorageError("Updated user could not be read back")
        return updated
