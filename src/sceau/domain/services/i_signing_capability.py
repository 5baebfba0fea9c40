"""
Signing capability interface.

Models the key holder (a wallet) as a separate trust domain: it owns the
private key, may refuse, and answers asynchronously.
"""

from abc import ABC, abstractmethod

import base58

from sceau.domain.entities.sign_in_output import SignInOutput


class ISigningCapability(ABC):
    """Opaque capability that signs canonical sign-in bytes."""

    @property
    @abstractmethod
    def public_key(self) -> bytes:
        """Raw public key of the signing account."""

    @property
    def address(self) -> str:
        """Solana address (base58 public key)."""
        return base58.b58encode(self.public_key).decode()

    @abstractmethod
    async def sign(self, message: bytes) -> SignInOutput:
        """
        Sign canonical message bytes.

        Args:
            message: Canonical challenge bytes

        Returns:
            SignInOutput with public key, signature and signed bytes

        Raises:
            SigningRefusedError: If the key holder declines
            SigningUnavailableError: If the capability fails
        """
