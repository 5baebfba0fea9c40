"""
VerifiedIdentity value object - outcome of a successful sign-in.
"""

from dataclasses import dataclass
from datetime import datetime

import base58


@dataclass(frozen=True)
class VerifiedIdentity:
    """
    Identity proven by a verified sign-in.

    Attributes:
        public_key: Raw Ed25519 public key of the signer
        verified_at: When verification succeeded (UTC)
    """

    public_key: bytes
    verified_at: datetime

    @property
    def address(self) -> str:
        """Solana address (base58 public key)."""
        return base58.b58encode(self.public_key).decode()

    def describe(self) -> str:
        """Human-readable summary for audit records."""
        return f"Signed in as {self.address}"
