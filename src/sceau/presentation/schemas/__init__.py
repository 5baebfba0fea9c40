"""
API schemas.
"""

from sceau.presentation.schemas.health_schemas import (
    ComponentHealth,
    HealthResponse,
)
from sceau.presentation.schemas.sign_in_schemas import (
    CreateSignInDataRequest,
    SignInAccountWire,
    SignInOutputWire,
    VerifySignInRequest,
    VerifySignInResponse,
)

__all__ = [
    "ComponentHealth",
    "HealthResponse",
    "CreateSignInDataRequest",
    "SignInAccountWire",
    "SignInOutputWire",
    "VerifySignInRequest",
    "VerifySignInResponse",
]
