"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A recording anti-spam test double
- Ready-made value objects
- An in-memory repository and registration service
"""

import pytest

from src.adapters.repository.in_memory import InMemoryUserRepository
from src.domain.registration import UserRegistrationService
from src.domain.value_objects import Email, UserId, UserName

VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"


class RecordingAntiSpam:
    """
    Anti-spam test double.

    Blocks addresses containing "blocked@" or on the spam.com domain,
    and records every address it was asked about.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def is_blocked(self, email: str) -> bool:
        self.calls.append(email)
        return "blocked@" in email or email.endswith("@spam.com")


@pytest.fixture
def anti_spam() -> RecordingAntiSpam:
    """Anti-spam double blocking 'blocked@' addresses and spam.com."""
    return RecordingAntiSpam()


@pytest.fixture
def email() -> Email:
    return Email.create("test@example.com")


@pytest.fixture
def name() -> UserName:
    return UserName.create("John Doe")


@pytest.fixture
def user_id() -> UserId:
    return UserId.create(VALID_UUID)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def service(
    repository: InMemoryUserRepository, anti_spam: RecordingAntiSpam
) -> UserRegistrationService:
    """Registration service over an empty in-memory repository."""
    return UserRegistrationService(repository=repository, anti_spam=anti_spam)
