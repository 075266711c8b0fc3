"""
Value objects - Immutable, validated domain primitives.

All validation happens at construction: an instance that exists is valid.
Equality is structural on the wrapped (normalized) value, courtesy of
frozen dataclasses.

Normalization rules:
- UserId: stored exactly as given (no case folding)
- UserName: NFC-composed, leading/trailing whitespace stripped
- Email: whitespace stripped + lowercased
"""

import re
import unicodedata
import uuid
from dataclasses import dataclass

from .exceptions import EmailBlocked, InvalidEmail, InvalidUserId, InvalidUserName
from .ports import AntiSpamChecker

_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254

_NAME_PUNCTUATION = frozenset(" -'")


def _compose(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def _has_name_charset(text: str) -> bool:
    # Combining marks left over after NFC must follow a letter or another mark
    previous = ""
    for ch in text:
        if unicodedata.category(ch).startswith("M"):
            if not previous or not (
                previous.isalpha() or unicodedata.category(previous).startswith("M")
            ):
                return False
        elif not (ch.isalpha() or ch in _NAME_PUNCTUATION):
            return False
        previous = ch
    return True


@dataclass(frozen=True)
class UserId:
    """
    User identifier wrapping a canonical UUID string.

    Format: 8-4-4-4-12 hexadecimal groups, upper or lower case.
    The version nibble is not checked.

    Raises:
        InvalidUserId: If the value is not a canonical UUID string
    """

    value: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise InvalidUserId(f"Invalid UserId format: {self.value!r}")

    @staticmethod
    def is_valid(candidate: str) -> bool:
        """Return True if candidate matches the canonical UUID grammar."""
        return isinstance(candidate, str) and _UUID_PATTERN.fullmatch(candidate) is not None

    @classmethod
    def generate(cls) -> "UserId":
        """Create an identifier from a fresh random (version 4) UUID."""
        return cls(str(uuid.uuid4()))

    @classmethod
    def create(cls, candidate: str | None = None) -> "UserId":
        """Wrap candidate when given, otherwise generate a new identifier."""
        if candidate is None:
            return cls.generate()
        return cls(candidate)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UserName:
    """
    Human display name.

    Format: 2-50 characters after trimming; letters (any script), spaces,
    hyphens and apostrophes only, so "O'Connor" and "Jean-Pierre" are fine.

    Raises:
        InvalidUserName: If the trimmed value breaks the length or charset rule
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.is_valid(self.value):
            raise InvalidUserName(f"Invalid user name: {self.value!r}")
        object.__setattr__(self, "value", _compose(self.value).strip())

    @staticmethod
    def is_valid(candidate: str) -> bool:
        """Return True if the trimmed candidate is an acceptable display name."""
        if not isinstance(candidate, str):
            return False
        trimmed = _compose(candidate).strip()
        if not trimmed:
            return False
        if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
            return False
        return _has_name_charset(trimmed)

    @classmethod
    def create(cls, candidate: str) -> "UserName":
        return cls(candidate)

    @property
    def first_name(self) -> str:
        return self.value.split()[0]

    @property
    def last_name(self) -> str:
        """Last token, or empty string for single-token names."""
        tokens = self.value.split()
        return tokens[-1] if len(tokens) > 1 else ""

    @property
    def initials(self) -> str:
        return "".join(token[0] for token in self.value.split()).upper()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Email:
    """
    Email address value object.

    The input is stripped and lowercased before validation, so two
    addresses differing only in case or surrounding whitespace are equal.

    Validation rules:
    1. Non-empty, at most 254 characters once trimmed (before lowercasing)
    2. No consecutive dots anywhere
    3. local@domain.tld shape: exactly one "@", no whitespace,
       at least one "." after the "@"

    Raises:
        InvalidEmail: If the normalized address breaks any rule
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidEmail(f"Invalid email format: {self.value!r}")
        normalized = self.normalize(self.value)
        if not self.is_valid(self.value):
            raise InvalidEmail(f"Invalid email format: {self.value.strip()!r}")
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def normalize(candidate: str) -> str:
        return candidate.strip().lower()

    @staticmethod
    def is_valid(candidate: str) -> bool:
        """Return True if the candidate is a well-formed address once normalized."""
        if not isinstance(candidate, str):
            return False
        if not 0 < len(candidate.strip()) <= EMAIL_MAX_LENGTH:
            return False
        normalized = Email.normalize(candidate)
        if ".." in normalized:
            return False
        return _EMAIL_PATTERN.fullmatch(normalized) is not None

    @classmethod
    def create(cls, candidate: str) -> "Email":
        return cls(candidate)

    @classmethod
    async def create_with_anti_spam_check(
        cls, candidate: str, anti_spam: AntiSpamChecker
    ) -> "Email":
        """
        Validate syntax, then ask the anti-spam checker about the address.

        The checker is only consulted for syntactically valid input and
        receives the normalized address. Exceptions raised by the checker
        (transport failures) propagate unchanged.

        Args:
            candidate: Raw email address from the caller
            anti_spam: Any object implementing the AntiSpamChecker port

        Returns:
            Validated Email

        Raises:
            InvalidEmail: If the address is malformed (checker not called)
            EmailBlocked: If the checker reports the address as blocked
        """
        email = cls(candidate)
        if await anti_spam.is_blocked(email.value):
            raise EmailBlocked(f"Email is blocked or blacklisted: {email.value}")
        return email

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    @property
    def local_part(self) -> str:
        return self.value.split("@", 1)[0]

    def __str__(self) -> str:
        return self.value
