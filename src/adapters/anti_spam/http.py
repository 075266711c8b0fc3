"""
HTTP anti-spam adapter - Implements AntiSpamChecker protocol.

Asks a remote anti-spam service whether an address is blocked:

    GET {base_url}/check?email=<address>  ->  {"blocked": true|false}

Transient transport failures (timeouts, refused connections) are
retried with exponential backoff. When the service still gives no
clean answer, the configured policy decides:

- fail_open=True:  log a warning and allow the address
- fail_open=False: raise AntiSpamUnavailable (the domain then refuses
  to produce an Email)
"""

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.domain.exceptions import AntiSpamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 2.0


class HttpAntiSpamChecker:
    """
    Implements AntiSpamChecker protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
        fail_open: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            base_url: Root URL of the anti-spam service
            timeout_seconds: Per-request timeout
            attempts: Total tries for transient transport errors
            backoff_seconds: Multiplier for exponential backoff between tries
            fail_open: Allow addresses when the service cannot answer
            client: Shared AsyncClient; a short-lived one is created per call if omitted
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._attempts = attempts
        self._backoff_seconds = backoff_seconds
        self._fail_open = fail_open
        self._client = client

    async def is_blocked(self, email: str) -> bool:
        """
        Query the remote service.

        Args:
            email: Email address (normalized by the domain layer)

        Returns:
            The service's verdict, or False when failing open

        Raises:
            AntiSpamUnavailable: If the service cannot answer and fail_open is False
        """
        try:
            if self._client is not None:
                blocked = await self._query(self._client, email)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    blocked = await self._query(client, email)
        except (httpx.HTTPError, ValueError) as e:
            return self._on_failure(email, e)

        if blocked:
            logger.info("Anti-spam service blocked address: %s", email)
        return blocked

    async def _query(self, client: httpx.AsyncClient, email: str) -> bool:
        response = await self._get_with_retry(client, email)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("blocked"), bool):
            raise ValueError(f"Unexpected anti-spam payload: {payload!r}")
        return payload["blocked"]

    async def _get_with_retry(self, client: httpx.AsyncClient, email: str) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._backoff_seconds, max=4),
            reraise=True,
        )
        return await retrying(
            client.get,
            f"{self._base_url}/check",
            params={"email": email},
            timeout=self._timeout_seconds,
        )

    def _on_failure(self, email: str, error: Exception) -> bool:
        if self._fail_open:
            logger.warning(
                "Anti-spam service unavailable, allowing %s (fail-open): %s",
                email,
                error,
            )
            return False

        logger.error("Anti-spam service unavailable, rejecting %s: %s", email, error)
        raise AntiSpamUnavailable(f"Anti-spam check failed for {email}") from error
