"""
Signing capability exceptions.

Raised on the client side of the handshake when the key holder declines
or cannot be reached. These are not security failures.
"""

from sceau.domain.exceptions.base import SceauException


class SigningError(SceauException):
    """Base exception for signing capability failures."""

    code = "SIGNING_FAILED"


class SigningRefusedError(SigningError):
    """Raised when the key holder declines to sign."""

    code = "SIGNING_REFUSED"

    def __init__(self, message: str = "User rejected the sign-in request"):
        super().__init__(message)


class SigningUnavailableError(SigningError):
    """Raised when the signing capability errors or times out."""

    code = "SIGNING_UNAVAILABLE"
