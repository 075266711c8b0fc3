"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols via structural
subtyping; none of them inherit from the Protocol classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

if TYPE_CHECKING:
    from .user import User
    from .value_objects import Email, UserId

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Repository operation completed; carries its value."""

    value: T
    is_success = True
    is_failure = False


@dataclass(frozen=True)
class Failure:
    """Repository operation failed; carries a descriptive error instead of raising it."""

    error: Exception
    is_success = False
    is_failure = True


Result = Success[T] | Failure


class AntiSpamChecker(Protocol):
    """
    Port interface for anti-spam decisions.

    Implementations own all state (blocklists, API clients) and decide
    their own failure policy: fail-open adapters answer False when the
    backend is unreachable, fail-closed adapters raise AntiSpamUnavailable.
    """

    async def is_blocked(self, email: str) -> bool:
        """
        Report whether an email address should be rejected.

        Args:
            email: Normalized (stripped, lowercased) email address

        Returns:
            True only when the address should be rejected
        """
        ...


class UserRepository(Protocol):
    """
    Port interface for user persistence.

    Every operation returns Success or Failure; adapters never let
    storage exceptions cross this boundary.
    """

    def save(self, user: User) -> Result[User]:
        """Insert or replace the user with the same identifier."""
        ...

    def find_by_id(self, user_id: UserId) -> Result[User | None]:
        """Return the user, or Success(None) if unknown."""
        ...

    def find_by_email(self, email: Email) -> Result[User | None]:
        """Return the user owning the normalized email, or Success(None)."""
        ...

    def find_all(self) -> Result[list[User]]:
        """Return all users ordered by creation time."""
        ...

    def delete(self, user_id: UserId) -> Result[None]:
        """Remove the user; deleting an unknown id is a Failure(UserNotFound)."""
        ...

    def exists(self, user_id: UserId) -> Result[bool]:
        """Return whether a user with this identifier is stored."""
        ...
