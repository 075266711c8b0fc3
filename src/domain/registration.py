"""
User registration domain service.

This module contains the use cases that sit on top of the User entity:
registering a user, changing their email or name, and the lookups the
API needs. Collaborators are passed in explicitly; there is no
process-wide container.

Validation pipeline for a new email
===================================

1. Syntax     - Email value object (InvalidEmail, checker never called)
2. Anti-spam  - injected AntiSpamChecker (EmailBlocked / AntiSpamUnavailable)
3. Allowlist  - optional EmailDomainPolicy (EmailDomainNotAllowed)
4. Uniqueness - repository lookup by email (EmailAlreadyRegistered)

Repository Failure results are re-raised as their carried error here,
so the service's callers only ever deal with exceptions.
"""

from dataclasses import dataclass

from .exceptions import EmailAlreadyRegistered, EmailDomainNotAllowed, UserNotFound
from .policies import EmailDomainPolicy
from .ports import AntiSpamChecker, Failure, Result, UserRepository
from .user import User
from .value_objects import Email, UserId, UserName


def _unwrap(result: Result):
    if isinstance(result, Failure):
        raise result.error
    return result.value


@dataclass
class UserRegistrationService:
    """
    Domain service for user registration and profile changes.

    Orchestrates value object validation, the anti-spam check,
    uniqueness checks and persistence.
    """

    repository: UserRepository
    anti_spam: AntiSpamChecker
    domain_policy: EmailDomainPolicy | None = None

    async def register(self, email: str, name: str) -> User:
        """
        Register a new user.

        Args:
            email: Raw email address (normalized by the Email value object)
            name: Raw display name (trimmed by the UserName value object)

        Returns:
            The newly created and persisted User

        Raises:
            InvalidEmail, InvalidUserName: On malformed input
            EmailBlocked: If the anti-spam check rejects the address
            EmailDomainNotAllowed: If the domain is outside the allowlist
            EmailAlreadyRegistered: If another user owns the address
        """
        user_name = UserName.create(name)
        validated_email = await self._validate_new_email(email)
        self._ensure_email_available(validated_email)

        user = User.create(validated_email, user_name)
        return _unwrap(self.repository.save(user))

    async def change_email(self, user_id: str, new_email: str) -> User:
        """
        Replace a user's email after running the full validation pipeline.

        Setting the address the user already has is a no-op and returns
        the stored snapshot unchanged.

        Raises:
            InvalidUserId: If user_id is malformed
            UserNotFound: If no such user exists
            EmailBlocked, EmailDomainNotAllowed, EmailAlreadyRegistered: As in register()
        """
        user = self.get_user(user_id)
        validated_email = await self._validate_new_email(new_email)
        if validated_email == user.email:
            return user
        self._ensure_email_available(validated_email)

        return _unwrap(self.repository.save(user.update_email(validated_email)))

    def change_name(self, user_id: str, new_name: str) -> User:
        """Replace a user's display name."""
        user = self.get_user(user_id)
        user_name = UserName.create(new_name)
        return _unwrap(self.repository.save(user.update_name(user_name)))

    def get_user(self, user_id: str) -> User:
        """
        Look up a user by identifier.

        Raises:
            InvalidUserId: If user_id is malformed
            UserNotFound: If no such user exists
        """
        uid = UserId.create(user_id)
        user = _unwrap(self.repository.find_by_id(uid))
        if user is None:
            raise UserNotFound(uid.value)
        return user

    def list_users(self) -> list[User]:
        return _unwrap(self.repository.find_all())

    def remove_user(self, user_id: str) -> None:
        """Delete a user; raises UserNotFound for unknown identifiers."""
        _unwrap(self.repository.delete(UserId.create(user_id)))

    async def _validate_new_email(self, email: str) -> Email:
        validated = await Email.create_with_anti_spam_check(email, self.anti_spam)
        if self.domain_policy is not None and not self.domain_policy.is_allowed(validated):
            raise EmailDomainNotAllowed(validated.value)
        return validated

    def _ensure_email_available(self, email: Email) -> None:
        if _unwrap(self.repository.find_by_email(email)) is not None:
            raise EmailAlreadyRegistered(email.value)
