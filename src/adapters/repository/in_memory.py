"""
In-memory repository adapter - Implements UserRepository protocol.

Stores User snapshots in a dict keyed by identifier. Used by the
default application wiring and by unit tests that don't need
PostgreSQL.
"""

import logging

from src.domain.exceptions import EmailAlreadyRegistered, UserNotFound
from src.domain.ports import Failure, Result, Success
from src.domain.user import User
from src.domain.value_objects import Email, UserId

logger = logging.getLogger(__name__)


class InMemoryUserRepository:
    """
    Implements UserRepository protocol with a plain dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Users are immutable, so stored snapshots are shared without copying.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def save(self, user: User) -> Result[User]:
        """
        Insert or replace the user with the same identifier.

        Returns:
            Success(user), or Failure(EmailAlreadyRegistered) if a
            different user already owns the email
        """
        owner = self._owner_of(user.email)
        if owner is not None and owner.id != user.id:
            return Failure(EmailAlreadyRegistered(user.email.value))

        self._users[user.id.value] = user
        logger.debug("Saved user %s", user.id)
        return Success(user)

    def find_by_id(self, user_id: UserId) -> Result[User | None]:
        return Success(self._users.get(user_id.value))

    def find_by_email(self, email: Email) -> Result[User | None]:
        return Success(self._owner_of(email))

    def find_all(self) -> Result[list[User]]:
        return Success(sorted(self._users.values(), key=lambda u: u.created_at))

    def delete(self, user_id: UserId) -> Result[None]:
        if self._users.pop(user_id.value, None) is None:
            return Failure(UserNotFound(user_id.value))
        logger.debug("Deleted user %s", user_id)
        return Success(None)

    def exists(self, user_id: UserId) -> Result[bool]:
        return Success(user_id.value in self._users)

    def _owner_of(self, email: Email) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None
