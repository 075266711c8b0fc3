"""
Unit tests for UserRegistrationService domain logic.

Tests the use cases against an in-memory repository and a
recording anti-spam double to verify:
- Validation pipeline ordering
- Uniqueness and allowlist rules
- Immutable updates persisted through the repository
- Repository failures surfacing as exceptions
"""

import asyncio
from unittest.mock import Mock

import pytest

from src.domain.exceptions import (
    EmailAlreadyRegistered,
    EmailBlocked,
    EmailDomainNotAllowed,
    InvalidEmail,
    InvalidUserId,
    InvalidUserName,
    RepositoryError,
    UserNotFound,
)
from src.domain.policies import EmailDomainPolicy
from src.domain.ports import Failure, Success
from src.domain.registration import UserRegistrationService
from src.domain.value_objects import Email

MISSING_UUID = "550e8400-e29b-41d4-a716-446655440000"


class TestRegister:
    """Tests for register()."""

    def test_register_creates_and_saves_user(self, service, repository) -> None:
        """A valid registration is persisted and returned."""
        user = asyncio.run(service.register("  John@Example.com ", "  John Doe "))

        assert user.email.value == "john@example.com"
        assert user.name.value == "John Doe"
        assert user.created_at == user.updated_at
        assert repository.find_by_id(user.id).value is user

    def test_register_consults_anti_spam(self, service, anti_spam) -> None:
        """The normalized address is checked for spam."""
        asyncio.run(service.register("John@Example.com", "John Doe"))
        assert anti_spam.calls == ["john@example.com"]

    def test_blocked_email_is_rejected(self, service, repository) -> None:
        """Blocked addresses raise EmailBlocked and nothing is saved."""
        with pytest.raises(EmailBlocked):
            asyncio.run(service.register("blocked@example.com", "John Doe"))
        assert repository.find_all().value == []

    def test_invalid_email_skips_anti_spam(self, service, anti_spam) -> None:
        """Malformed addresses never reach the checker."""
        with pytest.raises(InvalidEmail):
            asyncio.run(service.register("not-an-email", "John Doe"))
        assert anti_spam.calls == []

    def test_invalid_name_skips_anti_spam(self, service, anti_spam) -> None:
        """A bad name fails before any external call."""
        with pytest.raises(InvalidUserName):
            asyncio.run(service.register("john@example.com", "J0hn"))
        assert anti_spam.calls == []

    def test_duplicate_email_is_rejected(self, service) -> None:
        """A second user cannot claim the same normalized address."""
        asyncio.run(service.register("john@example.com", "John Doe"))

        with pytest.raises(EmailAlreadyRegistered) as exc_info:
            asyncio.run(service.register("JOHN@example.com", "Other Person"))
        assert "john@example.com" in str(exc_info.value)

    def test_domain_policy_rejects_other_domains(self, repository, anti_spam) -> None:
        """Addresses outside the allowlist raise EmailDomainNotAllowed."""
        service = UserRegistrationService(
            repository=repository,
            anti_spam=anti_spam,
            domain_policy=EmailDomainPolicy.from_domains(["corp.com", "university.edu"]),
        )

        user = asyncio.run(service.register("alice@corp.com", "Alice Smith"))
        assert user.email.domain == "corp.com"

        with pytest.raises(EmailDomainNotAllowed):
            asyncio.run(service.register("bob@gmail.com", "Bob Jones"))


class TestChangeEmail:
    """Tests for change_email()."""

    def test_change_email_persists_new_snapshot(self, service, repository) -> None:
        """The stored user gets the new address; identity is kept."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))

        updated = asyncio.run(service.change_email(user.id.value, "John.New@Example.com"))

        assert updated.id == user.id
        assert updated.email == Email("john.new@example.com")
        assert updated.updated_at >= user.updated_at
        assert user.email == Email("john@example.com")
        assert repository.find_by_id(user.id).value.email == Email("john.new@example.com")

    def test_change_to_blocked_email_is_rejected(self, service, repository) -> None:
        """The anti-spam check applies to changes as well."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))

        with pytest.raises(EmailBlocked):
            asyncio.run(service.change_email(user.id.value, "john@spam.com"))
        assert repository.find_by_id(user.id).value.email == Email("john@example.com")

    def test_change_to_taken_email_is_rejected(self, service) -> None:
        """An address owned by another user cannot be taken."""
        asyncio.run(service.register("alice@example.com", "Alice Smith"))
        bob = asyncio.run(service.register("bob@example.com", "Bob Jones"))

        with pytest.raises(EmailAlreadyRegistered):
            asyncio.run(service.change_email(bob.id.value, "alice@example.com"))

    def test_change_to_same_email_is_noop(self, service) -> None:
        """Re-setting the current address returns the stored snapshot."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))
        same = asyncio.run(service.change_email(user.id.value, "JOHN@example.com"))
        assert same is user

    def test_change_email_for_unknown_user(self, service) -> None:
        """Unknown ids raise UserNotFound."""
        with pytest.raises(UserNotFound):
            asyncio.run(service.change_email(MISSING_UUID, "john@example.com"))


class TestChangeName:
    """Tests for change_name()."""

    def test_change_name_persists_new_snapshot(self, service, repository) -> None:
        """The stored user gets the new name."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))

        updated = service.change_name(user.id.value, "Johnny Doe")

        assert updated.name.value == "Johnny Doe"
        assert updated.email == user.email
        assert repository.find_by_id(user.id).value.name.value == "Johnny Doe"

    def test_invalid_name_is_rejected(self, service) -> None:
        """Bad names raise InvalidUserName."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))
        with pytest.raises(InvalidUserName):
            service.change_name(user.id.value, "X")


class TestLookups:
    """Tests for get_user(), list_users() and remove_user()."""

    def test_get_user(self, service) -> None:
        """Registered users can be fetched by id string."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))
        assert service.get_user(user.id.value) is user

    def test_get_unknown_user(self, service) -> None:
        """Unknown ids raise UserNotFound."""
        with pytest.raises(UserNotFound):
            service.get_user(MISSING_UUID)

    def test_get_malformed_id(self, service) -> None:
        """Malformed ids raise InvalidUserId."""
        with pytest.raises(InvalidUserId):
            service.get_user("nope")

    def test_list_users_in_creation_order(self, service) -> None:
        """Users are listed oldest first."""
        first = asyncio.run(service.register("a@example.com", "Alice Smith"))
        second = asyncio.run(service.register("b@example.com", "Bob Jones"))
        assert [u.id for u in service.list_users()] == [first.id, second.id]

    def test_remove_user(self, service) -> None:
        """Removed users are gone."""
        user = asyncio.run(service.register("john@example.com", "John Doe"))
        service.remove_user(user.id.value)
        with pytest.raises(UserNotFound):
            service.get_user(user.id.value)

    def test_remove_unknown_user(self, service) -> None:
        """Removing an unknown id raises UserNotFound."""
        with pytest.raises(UserNotFound):
            service.remove_user(MISSING_UUID)


class TestRepositoryFailures:
    """Tests for Failure results surfacing as exceptions."""

    def test_failure_is_raised(self, anti_spam) -> None:
        """The error carried by a Failure is raised to the caller."""
        repo = Mock()
        repo.find_by_email.return_value = Success(None)
        repo.save.return_value = Failure(RepositoryError("disk full"))

        service = UserRegistrationService(repository=repo, anti_spam=anti_spam)

        with pytest.raises(RepositoryError, match="disk full"):
            asyncio.run(service.register("john@example.com", "John Doe"))
        repo.save.assert_called_once()

    def test_lookup_failure_blocks_save(self, anti_spam) -> None:
        """A failed uniqueness lookup stops registration before save."""
        repo = Mock()
        repo.find_by_email.return_value = Failure(RepositoryError("timeout"))

        service = UserRegistrationService(repository=repo, anti_spam=anti_spam)

        with pytest.raises(RepositoryError):
            asyncio.run(service.register("john@example.com", "John Doe"))
        repo.save.assert_not_called()
