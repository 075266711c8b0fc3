"""Email domain allowlist policy."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .value_objects import Email


@dataclass(frozen=True)
class EmailDomainPolicy:
    """
    Restricts registration to a set of email domains.

    Domains are compared lowercased and exactly: "corp.com" does not
    admit "mail.corp.com". An empty allowlist admits every domain.
    """

    allowed_domains: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_domains(cls, domains: Iterable[str]) -> "EmailDomainPolicy":
        return cls(frozenset(d.strip().lower() for d in domains if d.strip()))

    def is_allowed(self, email: Email) -> bool:
        if not self.allowed_domains:
            return True
        return email.domain in self.allowed_domains
