"""Unit tests for access-code formatting and issuance."""
from __future__ import annotations

import pytest

from app.models.user import User
from app.repositories.sequence_repository import SequenceRepository
from app.repositories.user_repository import UserRepository
from app.services.code_issuer import USER_CODE_SEQUENCE, CodeIssuer, format_code


@pytest.fixture
def issuer() -> CodeIssuer:
    return CodeIssuer(SequenceRepository(), UserRepository())


class TestFormatCode:
    @pytest.mark.parametrize(
        ("n", "expected"),
        [(1, "A01-1"), (7, "A07-7"), (9, "A09-9"), (10, "A10-10"), (42, "A42-42"), (123, "A123-123")],
    )
    def test_pads_prefix_to_two_digits_only(self, n, expected):
        assert format_code(n) == expected

    @pytest.mark.parametrize("n", [0, -3])
    def test_rejects_non_positive(self, n):
        with pytest.raises(ValueError):
            format_code(n)


class TestCodeIssuer:
    def test_issues_consecutive_codes_on_empty_store(self, issuer, db_session):
        issuer.ensure_seeded(db_session)

        assert issuer.issue(db_session) == "A01-1"
        assert issuer.issue(db_session) == "A02-2"
        assert issuer.issue(db_session) == "A03-3"

    def test_seeds_from_existing_record_count(self, issuer, db_session):
        for i in range(1, 4):
            db_session.add(User(email=f"legacy{i}@x.com", code=format_code(i)))
        db_session.commit()

        issuer.ensure_seeded(db_session)

        assert issuer.issue(db_session) == "A04-4"

    def test_seeds_lazily_when_counter_missing(self, issuer, db_session):
        assert not SequenceRepository().exists(db_session, USER_CODE_SEQUENCE)

        assert issuer.issue(db_session) == "A01-1"
        assert SequenceRepository().exists(db_session, USER_CODE_SEQUENCE)

    def test_seeding_twice_keeps_the_counter(self, issuer, db_session):
        issuer.ensure_seeded(db_session)
        issuer.issue(db_session)

        issuer.ensure_seeded(db_session)

        assert issuer.issue(db_session) == "A02-2"
