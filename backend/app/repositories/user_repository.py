"""Repository for user persistence and retrieval."""
from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateKeyError, StorageError
from app.models.user import User

LOGGER = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "last_name", "image_url", "updated_at"})


class UserRepository:
    def get_by_email(self, db: Session, email: str) -> User | None:
        try:
            return db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._storage_error(db, "lookup by email", exc) from exc

    def get_by_code(self, db: Session, code: str) -> User | None:
        try:
            return db.execute(select(User).where(User.code == code)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._storage_error(db, "lookup by code", exc) from exc

    def count(self, db: Session) -> int:
        try:
            return db.execute(select(func.count()).select_from(User)).scalar_one()
        except SQLAlchemyError as exc:
            raise self._storage_error(db, "count", exc) from exc

    def insert(self, db: Session, user: User) -> int:
        try:
            db.add(user)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            LOGGER.warning("Duplicate key on insert email=%s code=%s", user.email, user.code)
            raise DuplicateKeyError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise self._storage_error(db, "insert", exc) from exc
        return user.id

    def update_fields(self, db: Session, code: str, fields: Dict[str, Any]) -> int:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields not updatable: {sorted(unknown)}")
        try:
            result = db.execute(
                update(User).where(User.code == code).values(**fields).execution_options(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error(db, "update", exc) from exc
        return result.rowcount

    @staticmethod
    def _storage_error(db: Session, action: str, exc: SQLAlchemyError) -> StorageError:
        db.rollback()
        LOGGER.error("DB %s failed: %s", action, exc)
        return StorageError("Database error")
