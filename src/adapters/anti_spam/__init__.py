"""Anti-spam adapters - AntiSpamChecker implementations."""

from .allow_all import AllowAllAntiSpamChecker
from .blocklist import BlocklistAntiSpamChecker
from .http import HttpAntiSpamChecker

__all__ = ["AllowAllAntiSpamChecker", "BlocklistAntiSpamChecker", "HttpAntiSpamChecker"]
