"""
Verify Sign-In use case.

Checks a sign-in proof against the challenge it answers.
"""

import math
from datetime import datetime, timedelta
from typing import Callable, Optional

from sceau.domain.entities.challenge import Challenge
from sceau.domain.entities.sign_in_output import SignInOutput
from sceau.domain.exceptions import (
    BadSignatureError,
    ChallengeExpiredError,
    DomainMismatchError,
    MessageMismatchError,
    NonceReusedError,
)
from sceau.domain.services.i_nonce_store import INonceStore
from sceau.domain.services.i_signature_verifier import ISignatureVerifier
from sceau.domain.services.message_canonicalizer import canonicalize
from sceau.domain.value_objects.timestamp import utc_now
from sceau.domain.value_objects.verified_identity import VerifiedIdentity


class VerifySignIn:
    """
    Verify a Sign-In-With-Solana proof.

    Business rules (checked in order, first failure wins):
    1. Challenge domain equals the expected domain
    2. Now is inside [notBefore or issuedAt, expirationTime or
       issuedAt + max_window]
    3. Nonce is consumed exactly once (atomic check-and-mark)
    4. Client-supplied signed bytes equal the server's reconstruction
    5. Signature verifies over the reconstructed bytes

    The nonce is only consumed once steps 1-2 pass. Failures are final for
    the attempt: the client must fetch a new challenge.
    """

    def __init__(
        self,
        signature_verifier: ISignatureVerifier,
        expected_domain: str,
        max_window_seconds: int,
        nonce_store: Optional[INonceStore] = None,
        nonce_ttl_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize use case with dependencies.

        Args:
            signature_verifier: Service for signature verification
            expected_domain: Host this server answers for
            max_window_seconds: Window used when the challenge has no
                expirationTime
            nonce_store: Store for single-use enforcement (None =
                window-only replay protection)
            nonce_ttl_seconds: Minimum time consumed nonces are remembered
                (defaults to max_window_seconds, extended to the end of a
                longer challenge window)
            clock: UTC time source
        """
        self.signature_verifier = signature_verifier
        self.expected_domain = expected_domain
        self.max_window = timedelta(seconds=max_window_seconds)
        self.nonce_store = nonce_store
        self.nonce_ttl_seconds = nonce_ttl_seconds or max_window_seconds
        self.clock = clock

    async def execute(
        self,
        challenge: Challenge,
        output: SignInOutput,
        expected_domain: Optional[str] = None,
    ) -> VerifiedIdentity:
        """
        Execute sign-in verification.

        Args:
            challenge: Challenge the client claims to answer
            output: Proof produced by the signing capability
            expected_domain: Override for the configured domain

        Returns:
            VerifiedIdentity of the signer

        Raises:
            DomainMismatchError: Challenge bound to another domain
            ChallengeExpiredError: Outside the validity window
            NonceReusedError: Nonce already consumed or never issued
            MessageMismatchError: Signed bytes differ from reconstruction
            BadSignatureError: Signature does not verify
        """
        expected = expected_domain or self.expected_domain

        # 1. Domain binding
        if challenge.domain != expected:
            raise DomainMismatchError(expected=expected, actual=challenge.domain)

        # 2. Freshness
        now = self.clock()
        not_before = challenge.window_start()
        expires_at = challenge.window_end(self.max_window)
        if not (not_before <= now <= expires_at):
            raise ChallengeExpiredError(
                now=now, not_before=not_before, expires_at=expires_at
            )

        # 3. Single use (remembered until the window has closed)
        if self.nonce_store is not None:
            retention = max(
                self.nonce_ttl_seconds,
                math.ceil((expires_at - now).total_seconds()) + 1,
            )
            consumed = await self.nonce_store.consume(challenge.nonce, retention)
            if not consumed:
                raise NonceReusedError(challenge.nonce)

        # 4. Reconstruct canonical bytes (never trust signed_message)
        address = output.account.address
        expected_message = canonicalize(challenge, address)
        if bytes(output.signed_message) != expected_message:
            raise MessageMismatchError(address)

        # 5. Verify signature over the reconstructed bytes
        is_valid = await self.signature_verifier.verify_signature(
            public_key=output.account.public_key,
            message=expected_message,
            signature=output.signature,
        )
        if not is_valid:
            raise BadSignatureError(address)

        return VerifiedIdentity(
            public_key=bytes(output.account.public_key),
            verified_at=now,
        )
