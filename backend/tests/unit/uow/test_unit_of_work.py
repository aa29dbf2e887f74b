"""
Unit tests for the SQLAlchemy Units of Work (writer and read-only).
"""

from __future__ import annotations

import pytest
from chatauth.models import User
from chatauth.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from chatauth.uow import SQLAlchemyUnitOfWork as RWuow
from sqlalchemy import func, select

from tests.factories.user import UserFactory


def _count(session) -> int:
    return session.execute(select(func.count()).select_from(User)).scalar_one()


class TestSQLAlchemyUnitOfWorkWriter:
    def test_commits_on_success(self, session, factories_session):
        """
        GIVEN a writer UoW
        WHEN a user is added and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = _count(session)

        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        assert _count(session) == initial + 1

    def test_rolls_back_on_exception(self, session, factories_session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN nothing is persisted and the exception propagates.
        """
        initial = _count(session)

        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert _count(session) == initial


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, session, factories_session):
        user = UserFactory()

        with ROuow() as uow:
            assert uow.users.get_by_email(user.email).id == user.id

    def test_blocks_orm_flush_writes(self, session, factories_session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_discards_attempted_changes(self, session, factories_session):
        with RWuow() as uow:
            user = uow.users.add(UserFactory.build())
            user_id, original_email = user.id, user.email

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.users.get(user_id)
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        assert session.get(User, user_id).email == original_email

    def test_keeps_enclosing_work(self, session, factories_session):
        """Rows flushed by an outer scope survive a nested read-only UoW."""
        user = UserFactory()

        with ROuow():
            pass

        assert session.get(User, user.id) is not None
        assert _count(session) == 1

    def test_flush_guard_removed_on_exit(self, session, factories_session):
        with ROuow():
            pass

        session.add(UserFactory.build())
        session.flush()
