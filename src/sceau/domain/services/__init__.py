"""
Domain services and interfaces.
"""

from sceau.domain.services.i_nonce_store import INonceStore
from sceau.domain.services.i_signature_verifier import ISignatureVerifier
from sceau.domain.services.i_signing_capability import ISigningCapability
from sceau.domain.services.message_canonicalizer import (
    build_message_text,
    canonicalize,
)

__all__ = [
    "INonceStore",
    "ISignatureVerifier",
    "ISigningCapability",
    "build_message_text",
    "canonicalize",
]
