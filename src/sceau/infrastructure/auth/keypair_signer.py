"""
Keypair-backed signing capability.

Signs sign-in messages with a local Ed25519 key. Stands in for a wallet
in tests and command-line tooling.
"""

import json

from nacl.signing import SigningKey

from sceau.domain.entities.sign_in_output import SignInAccount, SignInOutput
from sceau.domain.services.i_signing_capability import ISigningCapability


class KeypairSigner(ISigningCapability):
    """Signing capability holding an Ed25519 signing key."""

    def __init__(self, signing_key: SigningKey):
        """
        Initialize signer.

        Args:
            signing_key: Ed25519 signing key
        """
        self._signing_key = signing_key

    @classmethod
    def generate(cls) -> "KeypairSigner":
        """Create signer with a fresh random key."""
        return cls(SigningKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "KeypairSigner":
        """
        Create signer from 32-byte seed.

        Args:
            seed: Ed25519 secret seed
        """
        return cls(SigningKey(bytes(seed)))

    @classmethod
    def from_keypair_file(cls, keypair_path: str) -> "KeypairSigner":
        """
        Load signer from Solana keypair JSON file.

        Args:
            keypair_path: Path to keypair JSON file

        Returns:
            KeypairSigner instance
        """
        with open(keypair_path, "r") as f:
            keypair_data = json.load(f)

        # Keypair JSON is array of bytes [secret_key + public_key]
        # First 32 bytes is the secret key
        return cls.from_seed(bytes(keypair_data[:32]))

    @property
    def public_key(self) -> bytes:
        return bytes(self._signing_key.verify_key)

    async def sign(self, message: bytes) -> SignInOutput:
        """
        Sign message bytes.

        Args:
            message: Canonical challenge bytes

        Returns:
            SignInOutput with detached signature
        """
        signed = self._signing_key.sign(bytes(message))
        return SignInOutput(
            account=SignInAccount(public_key=self.public_key),
            signature=bytes(signed.signature),
            signed_message=bytes(message),
        )
