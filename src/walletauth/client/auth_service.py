"""HTTP client for the challenge and verify endpoints."""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from walletauth.client.errors import ChallengeRequestFailed, VerificationRequestFailed
from walletauth.client.models import VerificationResult, normalize_address
from walletauth.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _error_payload(response: httpx.Response) -> Any:
    """Return the server's error body, parsed as JSON when possible."""
    try:
        return response.json()
    except ValueError:
        return response.text or response.reason_phrase


class AuthServiceClient:
    """Client for the wallet login endpoints of the authentication service.

    Makes exactly one request per call; retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        """Initialize client.

        Args:
            base_url: URL of the wallet login endpoints (e.g. http://host/metamask)
            timeout: Per-request timeout in seconds
            http_client: Externally owned HTTP client
            settings: Settings used for defaults
        """
        settings = settings or get_settings()
        self.base_url = (base_url or settings.metamask_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._http_client = http_client
        self._owns_client = http_client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AuthServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def request_challenge(self, address: str, domain: str, origin: str) -> str:
        """Request a challenge message bound to address, domain and origin.

        Args:
            address: Checksummed wallet address
            domain: Caller's host name
            origin: Caller's origin URI

        Returns:
            Challenge message text

        Raises:
            ChallengeRequestFailed: On transport error or non-2xx response
        """
        client = await self._get_http_client()
        try:
            response = await client.post(
                f"{self.base_url}/message",
                json={"address": address, "domain": domain, "uri": origin},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Error fetching SIWE message: {e}")
            raise ChallengeRequestFailed(
                f"Challenge request failed: {e}", payload=e, cause=e
            ) from e

        if response.is_error:
            payload = _error_payload(response)
            logger.error(f"Challenge request rejected ({response.status_code}): {payload}")
            raise ChallengeRequestFailed(
                f"Challenge request returned {response.status_code}",
                payload=payload,
                status_code=response.status_code,
            )

        message = response.text
        # Some servers send the message as a JSON string
        if message.startswith('"'):
            try:
                decoded = json.loads(message)
            except ValueError:
                decoded = None
            if isinstance(decoded, str):
                message = decoded

        if not message:
            raise ChallengeRequestFailed(
                "Challenge response was empty", status_code=response.status_code
            )
        return message

    async def verify(self, address: str, message: str, signature: str) -> VerificationResult:
        """Submit a signed challenge for verification.

        An explicit ``success: false`` is returned, not raised.

        Args:
            address: Address the caller expects to be authenticated
            message: Challenge message that was signed
            signature: Wallet signature

        Returns:
            VerificationResult from the server

        Raises:
            VerificationRequestFailed: On transport error, non-2xx or bad body
        """
        client = await self._get_http_client()
        try:
            response = await client.post(
                f"{self.base_url}/verify",
                json={"message": message, "signature": signature},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Verification request failed: {e}")
            raise VerificationRequestFailed(
                f"Verification request failed: {e}", payload=e, cause=e
            ) from e

        if response.is_error:
            payload = _error_payload(response)
            logger.error(
                f"Verification request rejected ({response.status_code}): {payload}"
            )
            raise VerificationRequestFailed(
                f"Verification request returned {response.status_code}",
                payload=payload,
                status_code=response.status_code,
            )

        try:
            result = VerificationResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise VerificationRequestFailed(
                "Verification response was not understood",
                payload=response.text,
                status_code=response.status_code,
                cause=e,
            ) from e

        if result.success and result.address is not None:
            try:
                matches = normalize_address(result.address) == normalize_address(address)
            except ValueError:
                matches = False
            if not matches:
                logger.warning(
                    f"Verified address {result.address} does not match {address}"
                )
                return VerificationResult(
                    success=False,
                    address=result.address,
                    error="Verified address does not match the connected wallet",
                )

        return result
