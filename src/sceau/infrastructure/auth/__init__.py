"""
Signature verification and signing adapters.
"""

from sceau.infrastructure.auth.keypair_signer import KeypairSigner
from sceau.infrastructure.auth.solana_signature_verifier import (
    SolanaSignatureVerifier,
)

__all__ = [
    "KeypairSigner",
    "SolanaSignatureVerifier",
]
