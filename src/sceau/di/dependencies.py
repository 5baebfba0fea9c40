"""
FastAPI dependency injection.

Provides dependencies for FastAPI routes using the DI container.
"""

from sceau.application.services.session_outcome_emitter import (
    SessionOutcomeEmitter,
)
from sceau.application.use_cases.create_sign_in_data import CreateSignInData
from sceau.application.use_cases.verify_sign_in import VerifySignIn
from sceau.di.container import get_container
from sceau.domain.services.i_nonce_store import INonceStore


def get_create_sign_in_data() -> CreateSignInData:
    """Get CreateSignInData use case dependency."""
    return get_container().get_create_sign_in_data()


def get_verify_sign_in() -> VerifySignIn:
    """Get VerifySignIn use case dependency."""
    return get_container().get_verify_sign_in()


def get_outcome_emitter() -> SessionOutcomeEmitter:
    """Get SessionOutcomeEmitter dependency."""
    return get_container().outcome_emitter


def get_nonce_store() -> INonceStore:
    """Get nonce store dependency."""
    return get_container().nonce_store
