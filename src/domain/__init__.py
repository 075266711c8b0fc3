"""
Domain layer - Pure business logic with zero framework imports.

This package contains the value objects, the User entity and the
registration use cases. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture
decoupling.
"""

from .exceptions import (
    AntiSpamUnavailable,
    DomainError,
    EmailAlreadyRegistered,
    EmailBlocked,
    EmailDomainNotAllowed,
    InvalidEmail,
    InvalidFormat,
    InvalidUserId,
    InvalidUserName,
    RepositoryError,
    UserNotFound,
)
from .policies import EmailDomainPolicy
from .ports import AntiSpamChecker, Failure, Result, Success, UserRepository
from .registration import UserRegistrationService
from .user import User
from .value_objects import Email, UserId, UserName

__all__ = [
    "AntiSpamChecker",
    "AntiSpamUnavailable",
    "DomainError",
    "Email",
    "EmailAlreadyRegistered",
    "EmailBlocked",
    "EmailDomainNotAllowed",
    "EmailDomainPolicy",
    "Failure",
    "InvalidEmail",
    "InvalidFormat",
    "InvalidUserId",
    "InvalidUserName",
    "RepositoryError",
    "Result",
    "Success",
    "User",
    "UserId",
    "UserName",
    "UserNotFound",
    "UserRegistrationService",
    "UserRepository",
]
