"""
SignInOutput entity - proof returned by the signing capability.
"""

from dataclasses import dataclass

import base58


@dataclass(frozen=True)
class SignInAccount:
    """Account that produced the signature."""

    public_key: bytes

    @property
    def address(self) -> str:
        """Solana address (base58 public key)."""
        return base58.b58encode(self.public_key).decode()


@dataclass(frozen=True)
class SignInOutput:
    """
    Client-produced proof of key control.

    signed_message is only the payload the client claims to have signed.
    The verifier reconstructs the expected bytes itself and never treats
    this value as authoritative.
    """

    account: SignInAccount
    signature: bytes
    signed_message: bytes
