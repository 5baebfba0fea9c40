"""
Create Sign-In Data use case.

Issues a fresh, domain-bound sign-in challenge.
"""

import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence
from urllib.parse import urlsplit

from sceau.domain.entities.challenge import SIWS_VERSION, Challenge
from sceau.domain.exceptions import MalformedRequestError
from sceau.domain.services.i_nonce_store import INonceStore
from sceau.domain.value_objects.timestamp import utc_now

# 16 random bytes = 128 bits of entropy
NONCE_BYTES = 16

_DEFAULT_PORTS = {"http": 80, "https": 443}


def derive_domain(request_origin: str) -> str:
    """
    Derive challenge domain from the origin URI's authority.

    Returns host plus explicit non-default port, without userinfo
    (same as a browser's URL.host).

    Raises:
        MalformedRequestError: If the URI is not an absolute http(s) URI
    """
    if not request_origin or any(ch.isspace() for ch in request_origin):
        raise MalformedRequestError(
            "uri", "must be a non-empty URI without whitespace"
        )

    try:
        parts = urlsplit(request_origin)
        port = parts.port
    except ValueError as e:
        raise MalformedRequestError("uri", str(e))

    if parts.scheme not in _DEFAULT_PORTS:
        raise MalformedRequestError("uri", "scheme must be http or https")

    host = parts.hostname
    if not host:
        raise MalformedRequestError("uri", "missing host")

    if ":" in host:
        host = f"[{host}]"

    if port is not None and port != _DEFAULT_PORTS[parts.scheme]:
        return f"{host}:{port}"
    return host


class CreateSignInData:
    """
    Challenge generator.

    Business rules:
    - Domain comes from the request origin's host, nothing else
    - Origins on a foreign host are refused when an expected domain is set
    - Nonce is 128 bits from the OS CSPRNG, fresh per call
    - Challenge expires ttl_seconds after issuance
    - Issued nonce is recorded so the verifier can enforce single use
    """

    def __init__(
        self,
        statement: str,
        ttl_seconds: int,
        nonce_store: Optional[INonceStore] = None,
        expected_domain: Optional[str] = None,
        chain_id: Optional[str] = None,
        resources: Optional[Sequence[str]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize use case with dependencies.

        Args:
            statement: Human-readable purpose text
            ttl_seconds: Challenge lifetime in seconds
            nonce_store: Store recording issued nonces (None = window-only
                replay protection)
            expected_domain: Host this server answers for
            chain_id: Optional chain discriminator (e.g. "solana:mainnet")
            resources: Optional resource URIs included in every challenge
            clock: UTC time source
        """
        self.statement = statement
        self.ttl_seconds = ttl_seconds
        self.nonce_store = nonce_store
        self.expected_domain = expected_domain
        self.chain_id = chain_id
        self.resources = tuple(resources) if resources else None
        self.clock = clock

    async def execute(self, request_origin: str) -> Challenge:
        """
        Execute challenge generation.

        Args:
            request_origin: URI of the page requesting sign-in

        Returns:
            Fresh Challenge

        Raises:
            MalformedRequestError: If the origin is malformed or foreign
        """
        # 1. Derive domain from origin
        domain = derive_domain(request_origin)

        if self.expected_domain and domain != self.expected_domain:
            raise MalformedRequestError(
                "uri",
                f"origin host '{domain}' is not served by this server",
            )

        # 2. Build challenge
        issued_at = self.clock()
        try:
            challenge = Challenge(
                domain=domain,
                statement=self.statement,
                uri=request_origin,
                version=SIWS_VERSION,
                chain_id=self.chain_id,
                nonce=secrets.token_urlsafe(NONCE_BYTES),
                issued_at=issued_at,
                expiration_time=issued_at + timedelta(seconds=self.ttl_seconds),
                resources=self.resources,
            )
        except ValueError as e:
            raise MalformedRequestError("uri", str(e))

        # 3. Record nonce for single-use enforcement
        if self.nonce_store is not None:
            await self.nonce_store.issue(challenge.nonce, self.ttl_seconds)

        return challenge
