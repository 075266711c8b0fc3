"""
User entity - Identity-bearing aggregate built from value objects.

A User is an immutable snapshot. Every logical change produces a new
instance through dataclasses.replace(); the original keeps its fields.

Lifecycle:
- create(): fresh user, one clock read for created_at == updated_at
- reconstitute(): rebuilt from storage, timestamps taken as given
- update_email() / update_name(): new snapshot, updated_at refreshed but
  never moved behind the previous created_at or updated_at

Identity is the UserId alone: two snapshots with the same id are the
same logical user, whatever their email, name or timestamps.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from .value_objects import Email, UserId, UserName


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _touched(created_at: datetime, updated_at: datetime) -> datetime:
    return max(_now(), created_at, updated_at)


@dataclass(frozen=True, eq=False)
class User:
    """User aggregate root."""

    id: UserId
    email: Email
    name: UserName
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, email: Email, name: UserName, id: UserId | None = None) -> "User":
        """
        Create a brand-new user.

        Args:
            email: Already validated email
            name: Already validated name
            id: Optional identifier; a fresh one is generated when omitted

        Returns:
            User with created_at == updated_at
        """
        now = _now()
        return cls(
            id=id if id is not None else UserId.generate(),
            email=email,
            name=name,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UserId,
        email: Email,
        name: UserName,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        """Assemble a user from previously persisted parts. No clock access."""
        return cls(id=id, email=email, name=name, created_at=created_at, updated_at=updated_at)

    def update_email(self, new_email: Email) -> "User":
        return replace(
            self, email=new_email, updated_at=_touched(self.created_at, self.updated_at)
        )

    def update_name(self, new_name: UserName) -> "User":
        return replace(
            self, name=new_name, updated_at=_touched(self.created_at, self.updated_at)
        )

    def equals(self, other: object) -> bool:
        """Identity comparison: True iff other is a User with the same id."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, str]:
        """Serialize to primitives: wrapped strings and ISO-8601 timestamps."""
        return {
            "id": self.id.value,
            "email": self.email.value,
            "name": self.name.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """
        Rebuild a user from to_dict() output.

        Each value object goes through its normal construction path,
        so corrupted records raise the usual format errors.

        Raises:
            InvalidUserId, InvalidEmail, InvalidUserName: On bad field values
            KeyError: If a field is missing
            ValueError: If a timestamp is not ISO-8601
        """
        return cls.reconstitute(
            id=UserId(data["id"]),
            email=Email(data["email"]),
            name=UserName(data["name"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
        )
