"""
Allow-all anti-spam adapter - Implements AntiSpamChecker protocol.

Stub for development and demos where no anti-spam backend exists.
"""


class AllowAllAntiSpamChecker:
    """
    Implements AntiSpamChecker protocol by never blocking.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    async def is_blocked(self, email: str) -> bool:
        return False
