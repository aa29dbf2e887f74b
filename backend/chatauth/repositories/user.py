"""User repository for credential lookups and inserts."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from chatauth.models.user import User
from chatauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes passwords or touches tokens; only DB-level user records.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email.

        Emails are matched as stored; no case folding is applied.

        :param email: Email address to search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email)
        stmt = self._default_eagerload(stmt)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

