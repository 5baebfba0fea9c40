"""
Signature verifier interface.
"""

from abc import ABC, abstractmethod


class ISignatureVerifier(ABC):
    """
    Interface for signature verification.

    Implementations check a detached signature against a raw public key.
    """

    @abstractmethod
    async def verify_signature(
        self,
        public_key: bytes,
        message: bytes,
        signature: bytes,
    ) -> bool:
        """
        Verify signature over message.

        Args:
            public_key: Raw signer public key
            message: Bytes that were signed
            signature: Detached signature

        Returns:
            True if signature is valid, False otherwise
        """
