"""
Blocklist anti-spam adapter - Implements AntiSpamChecker protocol.

Keeps banned addresses and banned domains in memory. Used by the
default application wiring and as a controllable test double.
"""

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class BlocklistAntiSpamChecker:
    """
    Implements AntiSpamChecker protocol from in-memory blocklists.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All comparisons are case-insensitive; entries are stored lowercased.
    """

    def __init__(
        self,
        banned_emails: Iterable[str] = (),
        banned_domains: Iterable[str] = (),
    ) -> None:
        self._banned_emails: set[str] = {e.strip().lower() for e in banned_emails}
        self._banned_domains: set[str] = {d.strip().lower() for d in banned_domains}

    async def is_blocked(self, email: str) -> bool:
        """
        Check the address and its domain against the blocklists.

        Args:
            email: Email address (normalized by the domain layer)

        Returns:
            True if the address or its domain is banned
        """
        normalized = email.strip().lower()
        domain = normalized.rpartition("@")[2]

        if normalized in self._banned_emails:
            logger.info("Anti-spam blocked address: %s", normalized)
            return True
        if domain in self._banned_domains:
            logger.info("Anti-spam blocked domain %s for address: %s", domain, normalized)
            return True
        return False

    def ban(self, email: str) -> None:
        self._banned_emails.add(email.strip().lower())

    def unban(self, email: str) -> None:
        self._banned_emails.discard(email.strip().lower())

    def ban_domain(self, domain: str) -> None:
        self._banned_domains.add(domain.strip().lower())

    def all_banned(self) -> list[str]:
        """Return banned addresses in sorted order."""
        return sorted(self._banned_emails)

    def clear(self) -> None:
        """Forget every banned address and domain."""
        self._banned_emails.clear()
        self._banned_domains.clear()
