"""
Domain exceptions - Semantic error types for user registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Format errors are also ValueErrors: the offending input is always
part of the message, and retrying with the same input never helps.
"""


class DomainError(Exception):
    """Base class for user domain errors."""

    pass


class InvalidFormat(DomainError, ValueError):
    """A value object's input failed its syntactic invariant."""

    pass


class InvalidUserId(InvalidFormat):
    """Identifier is not a canonical UUID string."""

    pass


class InvalidUserName(InvalidFormat):
    """Name has a bad length or disallowed characters."""

    pass


class InvalidEmail(InvalidFormat):
    """Email address is malformed."""

    pass


class EmailBlocked(DomainError):
    """Email passed syntactic validation but the anti-spam check rejected it."""

    pass


class AntiSpamUnavailable(DomainError):
    """Anti-spam backend could not give a clean answer (network, timeout, bad payload)."""

    pass


class EmailDomainNotAllowed(DomainError):
    """Email domain is outside the configured allowlist."""

    pass


class EmailAlreadyRegistered(DomainError):
    """Another user already owns this email address."""

    pass


class UserNotFound(DomainError):
    """No user exists with the requested identifier."""

    pass


class RepositoryError(DomainError):
    """Persistence adapter failed to complete an operation."""

    pass
