"""Repository for atomically reserved counters."""
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.models.sequence import Sequence

LOGGER = logging.getLogger(__name__)


class SequenceRepository:
    def exists(self, db: Session, name: str) -> bool:
        try:
            return db.get(Sequence, name) is not None
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.error("DB sequence lookup failed for %s: %s", name, exc)
            raise StorageError("Database error") from exc

    def create(self, db: Session, name: str, start: int) -> None:
        """Create the counter at ``start``; a concurrent creator winning the race is fine."""
        try:
            db.add(Sequence(name=name, value=start))
            db.commit()
            LOGGER.info("✅ Sequence %s seeded at %s", name, start)
        except IntegrityError:
            db.rollback()
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.error("DB sequence seed failed for %s: %s", name, exc)
            raise StorageError("Database error") from exc

    def reserve_next(self, db: Session, name: str) -> int | None:
        """Increment the counter and return the new value, or None if it does not exist.

        The UPDATE takes the row lock, so the value read back in the same
        transaction belongs to this caller alone. The reservation is committed
        immediately and is never handed out again.
        """
        try:
            result = db.execute(
                update(Sequence)
                .where(Sequence.name == name)
                .values(value=Sequence.value + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                return None
            value = db.execute(select(Sequence.value).where(Sequence.name == name)).scalar_one()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.error("DB sequence reserve failed for %s: %s", name, exc)
            raise StorageError("Database error") from exc
        return value
