"""
Base exceptions for Sceau.
"""


class SceauException(Exception):
    """
    Base exception for all Sceau domain errors.

    Attributes:
        message: Human-readable description
        code: Machine-readable error code (used for HTTP mapping)
    """

    code: str = "SCEAU_ERROR"

    def __init__(self, message: str, code: str = None):
        """
        Initialize Sceau exception.

        Args:
            message: Error message
            code: Optional error code override
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class MalformedRequestError(SceauException):
    """Raised when a request is missing fields or carries invalid values."""

    code = "MALFORMED_REQUEST"

    def __init__(self, field: str, reason: str):
        """
        Initialize malformed request error.

        Args:
            field: Name of the offending field
            reason: Why the value was rejected
        """
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class NonceStoreUnavailableError(SceauException):
    """Raised when the nonce store cannot be reached in time."""

    code = "NONCE_STORE_UNAVAILABLE"
