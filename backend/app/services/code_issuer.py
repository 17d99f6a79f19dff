"""Issues human-readable access codes such as ``A01-1``."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.repositories.sequence_repository import SequenceRepository
from app.repositories.user_repository import UserRepository

LOGGER = logging.getLogger(__name__)

USER_CODE_SEQUENCE = "user_code"


def format_code(n: int) -> str:
    if n < 1:
        raise ValueError(f"sequence number must be >= 1, got {n}")
    return f"A{n:02d}-{n}"


class CodeIssuer:
    def __init__(self, sequence_repository: SequenceRepository, user_repository: UserRepository) -> None:
        self.sequence_repository = sequence_repository
        self.user_repository = user_repository

    def ensure_seeded(self, db: Session) -> None:
        """Start the counter at the current record count so the next code is ``count + 1``."""
        if self.sequence_repository.exists(db, USER_CODE_SEQUENCE):
            return
        self.sequence_repository.create(db, USER_CODE_SEQUENCE, self.user_repository.count(db))

    def issue(self, db: Session) -> str:
        n = self.sequence_repository.reserve_next(db, USER_CODE_SEQUENCE)
        if n is None:
            self.ensure_seeded(db)
            n = self.sequence_repository.reserve_next(db, USER_CODE_SEQUENCE)
        if n is None:
            raise StorageError("Could not reserve an access code")
        code = format_code(n)
        LOGGER.info("🔑 Issued code %s", code)
        return code
