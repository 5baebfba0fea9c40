"""
Domain exceptions package.
"""

# Base exceptions
from sceau.domain.exceptions.base import (
    MalformedRequestError,
    NonceStoreUnavailableError,
    SceauException,
)

# Signing exceptions
from sceau.domain.exceptions.signing import (
    SigningError,
    SigningRefusedError,
    SigningUnavailableError,
)

# Verification exceptions
from sceau.domain.exceptions.verification import (
    BadSignatureError,
    ChallengeExpiredError,
    DomainMismatchError,
    MessageMismatchError,
    NonceReusedError,
    VerificationError,
)

__all__ = [
    # Base
    "SceauException",
    "MalformedRequestError",
    "NonceStoreUnavailableError",
    # Verification
    "VerificationError",
    "DomainMismatchError",
    "ChallengeExpiredError",
    "NonceReusedError",
    "MessageMismatchError",
    "BadSignatureError",
    # Signing
    "SigningError",
    "SigningRefusedError",
    "SigningUnavailableError",
]
