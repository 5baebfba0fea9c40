"""
Sign-in verification exceptions.

Every subclass is a policy failure: the attempt is rejected and must be
restarted with a fresh challenge. None of them is retried.
"""

from datetime import datetime
from typing import Optional

from sceau.domain.exceptions.base import SceauException
from sceau.domain.value_objects.timestamp import format_timestamp


class VerificationError(SceauException):
    """Base exception for sign-in verification failures."""

    code = "VERIFICATION_FAILED"


class DomainMismatchError(VerificationError):
    """Raised when the challenge was bound to another domain."""

    code = "DOMAIN_MISMATCH"

    def __init__(self, expected: str, actual: str):
        """
        Initialize domain mismatch error.

        Args:
            expected: Domain this server answers for
            actual: Domain found in the challenge
        """
        super().__init__(
            f"Challenge domain '{actual}' does not match "
            f"expected domain '{expected}'"
        )
        self.expected = expected
        self.actual = actual


class ChallengeExpiredError(VerificationError):
    """Raised when verification happens outside the validity window."""

    code = "EXPIRED"

    def __init__(self, now: datetime, not_before: datetime, expires_at: datetime):
        """
        Initialize expired challenge error.

        Args:
            now: Verification time
            not_before: Start of the validity window
            expires_at: End of the validity window
        """
        super().__init__(
            f"Challenge is not valid at {format_timestamp(now)} "
            f"(window {format_timestamp(not_before)} .. "
            f"{format_timestamp(expires_at)})"
        )
        self.now = now
        self.not_before = not_before
        self.expires_at = expires_at


class NonceReusedError(VerificationError):
    """Raised when a nonce was already consumed or never issued."""

    code = "NONCE_REUSED"

    def __init__(self, nonce: str):
        """
        Initialize nonce reuse error.

        Args:
            nonce: Rejected nonce
        """
        super().__init__(
            f"Nonce '{nonce}' was already used or was not issued by this server"
        )
        self.nonce = nonce


class MessageMismatchError(VerificationError):
    """Raised when the signed bytes differ from the reconstructed message."""

    code = "MESSAGE_MISMATCH"

    def __init__(self, address: Optional[str] = None):
        """
        Initialize message mismatch error.

        Args:
            address: Signer address, if known
        """
        message = "Signed message does not match the issued challenge"
        if address:
            message = f"{message} for account {address}"
        super().__init__(message)
        self.address = address


class BadSignatureError(VerificationError):
    """Raised when the Ed25519 signature does not verify."""

    code = "BAD_SIGNATURE"

    def __init__(self, address: str):
        """
        Initialize bad signature error.

        Args:
            address: Signer address the signature was checked against
        """
        super().__init__(f"Invalid signature for account {address}")
        self.address = address
