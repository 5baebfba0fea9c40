"""
Sign-in HTTP client.

Drives the Sign-In-With-Solana handshake from the relying party's side:
fetch a challenge, have the signing capability sign its canonical bytes,
submit the proof and record the outcome.

Examples:
    async with SignInClient("http://localhost:4000/api") as client:
        record = await client.sign_in(signer, "http://localhost:3000/")
        if record.is_success:
            ...
"""

import asyncio
from typing import Optional

import httpx

from sceau.application.services.session_outcome_emitter import (
    SessionOutcomeEmitter,
)
from sceau.config.settings import Settings, get_settings
from sceau.domain.entities.challenge import Challenge
from sceau.domain.entities.sign_in_output import SignInOutput
from sceau.domain.exceptions import (
    SceauException,
    SigningError,
    SigningUnavailableError,
    VerificationError,
)
from sceau.domain.services.i_signing_capability import ISigningCapability
from sceau.domain.services.message_canonicalizer import canonicalize
from sceau.domain.value_objects.verification_record import VerificationRecord
from sceau.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

SIGN_IN_METHOD = "signIn"


class SignInClient:
    """
    HTTP client for the sign-in service.

    Every HTTP call and the signing request carry the client timeout.
    Only challenge fetching is retried: a submitted proof is single-use,
    so a failed submission needs a fresh challenge and a new signature.

    Attributes:
        endpoint: Base URL of the sign-in routes (e.g. ".../api")
        timeout: HTTP and signing timeout in seconds
        max_retries: Attempts for fetching a challenge
        emitter: Outcome emitter receiving one record per attempt
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        emitter: Optional[SessionOutcomeEmitter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize sign-in client.

        Args:
            endpoint: Base URL of the sign-in routes
            timeout: HTTP and signing timeout in seconds
            max_retries: Attempts for fetching a challenge
            emitter: Outcome emitter (new one if None)
            http_client: Pre-built HTTP client (e.g. ASGI transport in tests)
        """
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.emitter = emitter if emitter is not None else SessionOutcomeEmitter()

        # Async HTTP client (lazy initialization)
        self._client: Optional[httpx.AsyncClient] = http_client

        logger.debug(f"SignInClient initialized: {self.endpoint}")

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        emitter: Optional[SessionOutcomeEmitter] = None,
    ) -> "SignInClient":
        """
        Build client from SERVICE_ENDPOINT and CLIENT_TIMEOUT.

        Args:
            settings: Settings to read (global if None)
            emitter: Outcome emitter (new one if None)
        """
        settings = settings or get_settings()
        return cls(
            settings.SERVICE_ENDPOINT,
            timeout=settings.CLIENT_TIMEOUT,
            emitter=emitter,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Get or create async HTTP client.

        Returns:
            Async HTTP client instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )

        return self._client

    async def fetch_challenge(self, uri: str) -> Challenge:
        """
        Request a fresh challenge for the given page URI.

        Transport failures are retried with exponential backoff.

        Args:
            uri: URI of the page requesting sign-in

        Returns:
            Challenge issued by the server

        Raises:
            SceauException: If the server rejects the request
            httpx.HTTPError: If every attempt failed in transport
        """
        url = f"{self.endpoint}/createSignInData"

        for attempt in range(self.max_retries):
            try:
                response = await self.client.post(
                    url, json={"uri": uri}, timeout=self.timeout
                )
                break

            except httpx.TransportError as e:
                logger.warning(
                    f"Challenge request failed "
                    f"(attempt {attempt + 1}/{self.max_retries}): {e}"
                )
                if attempt == self.max_retries - 1:
                    raise

                # Wait before retry (exponential backoff)
                await asyncio.sleep(0.1 * (2**attempt))

        if response.status_code != 200:
            raise self._error_from_response(response)

        return Challenge.model_validate(response.json())

    async def request_signature(
        self, capability: ISigningCapability, challenge: Challenge
    ) -> SignInOutput:
        """
        Ask the signing capability to sign the challenge.

        Args:
            capability: Key holder
            challenge: Challenge to sign

        Returns:
            SignInOutput from the capability

        Raises:
            SigningRefusedError: If the key holder declines
            SigningUnavailableError: If signing fails or times out
        """
        message = canonicalize(challenge, capability.address)

        try:
            return await asyncio.wait_for(
                capability.sign(message), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise SigningUnavailableError(
                f"Signing timed out after {self.timeout}s"
            )
        except SigningError:
            raise
        except Exception as e:
            raise SigningUnavailableError(f"Signing failed: {e}") from e

    async def submit_proof(
        self, challenge: Challenge, output: SignInOutput
    ) -> str:
        """
        Submit sign-in output for verification.

        Args:
            challenge: Challenge that was signed
            output: Output from the signing capability

        Returns:
            Verified account address

        Raises:
            VerificationError: If the server rejected the proof
            SceauException: If the server rejected the request
            httpx.HTTPError: On transport failure
        """
        url = f"{self.endpoint}/verifySIWS"
        payload = {
            "input": challenge.to_wire(),
            "output": {
                "account": {
                    "publicKey": list(output.account.public_key),
                    "address": output.account.address,
                },
                "signature": list(output.signature),
                "signedMessage": list(output.signed_message),
            },
        }

        response = await self.client.post(url, json=payload, timeout=self.timeout)

        if response.status_code != 200:
            raise self._error_from_response(response)

        try:
            body = response.json()
        except ValueError as e:
            raise SceauException(
                f"Invalid verification response: {e}", code="INVALID_RESPONSE"
            ) from e

        # Bare boolean or {ok, error, address}
        if isinstance(body, bool):
            body = {"ok": body}
        elif not isinstance(body, dict):
            raise SceauException(
                f"Invalid verification response: {str(body)[:200]}",
                code="INVALID_RESPONSE",
            )

        if body.get("ok") is not True:
            kind = body.get("error") or VerificationError.code
            raise VerificationError(
                f"Sign-in verification failed: {kind}", code=str(kind)
            )

        return body.get("address") or output.account.address

    async def sign_in(
        self, capability: ISigningCapability, uri: str
    ) -> VerificationRecord:
        """
        Run the full handshake and record its outcome.

        Never raises for handshake failures: every outcome becomes a
        VerificationRecord under method "signIn".

        Args:
            capability: Key holder
            uri: URI of the page requesting sign-in

        Returns:
            Recorded outcome
        """
        try:
            challenge = await self.fetch_challenge(uri)
            output = await self.request_signature(capability, challenge)
            address = await self.submit_proof(challenge, output)

        except (SceauException, httpx.HTTPError, ValueError) as e:
            logger.error(f"Sign-in failed: {e}")
            return self.emitter.record(SIGN_IN_METHOD, e)

        return self.emitter.record(SIGN_IN_METHOD, f"Signed in as {address}")

    def _error_from_response(self, response: httpx.Response) -> SceauException:
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        code = body.get("error") or f"HTTP_{response.status_code}"
        message = body.get("message") or body.get("detail") or response.text[:200]
        return SceauException(
            f"Request rejected (HTTP {response.status_code}): {message}",
            code=str(code),
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "SignInClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
