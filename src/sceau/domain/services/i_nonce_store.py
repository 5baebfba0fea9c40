"""
Nonce store interface.

Backs single-use enforcement for sign-in challenges.
"""

from abc import ABC, abstractmethod


class INonceStore(ABC):
    """
    Short-lived store of issued and consumed nonces.

    consume() is the only operation that must be atomic: two concurrent
    calls for the same nonce must never both return True.
    """

    async def connect(self) -> None:
        """Establish connection to the backing store (if any)."""

    async def disconnect(self) -> None:
        """Close connection to the backing store (if any)."""

    @abstractmethod
    async def issue(self, nonce: str, ttl_seconds: int) -> None:
        """
        Record nonce as issued.

        Args:
            nonce: Freshly generated nonce
            ttl_seconds: How long the nonce stays redeemable
        """

    @abstractmethod
    async def consume(self, nonce: str, ttl_seconds: int) -> bool:
        """
        Atomically check and mark nonce as consumed.

        Args:
            nonce: Nonce presented for verification
            ttl_seconds: How long to remember the consumption

        Returns:
            True if this call consumed the nonce, False if it was
            already consumed (or, in strict mode, never issued)
        """

    @abstractmethod
    async def ping(self) -> bool:
        """
        Check if the store is reachable.

        Returns:
            True if store responds
        """
