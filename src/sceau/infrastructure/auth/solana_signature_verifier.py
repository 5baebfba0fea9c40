"""
Solana signature verifier.

Implements signature verification using Ed25519.
"""

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from sceau.domain.services.i_signature_verifier import ISignatureVerifier


class SolanaSignatureVerifier(ISignatureVerifier):
    """
    Solana account signature verification using Ed25519.

    Works on raw bytes: the public key is the 32-byte account key and the
    signature is the 64-byte detached signature.
    """

    async def verify_signature(
        self,
        public_key: bytes,
        message: bytes,
        signature: bytes,
    ) -> bool:
        """
        Verify Ed25519 signature.

        Args:
            public_key: 32-byte account public key
            message: Bytes that were signed
            signature: 64-byte detached signature

        Returns:
            True if signature is valid, False otherwise
        """
        try:
            verify_key = VerifyKey(bytes(public_key))
            verify_key.verify(bytes(message), bytes(signature))
            return True

        except (BadSignatureError, ValueError, TypeError):
            # nacl raises ValueError/TypeError for malformed key or signature
            return False
