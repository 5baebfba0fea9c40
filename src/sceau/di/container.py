"""
Dependency Injection Container for Sceau.

Manages all service instances and their dependencies.
"""

from typing import Optional

from sceau.application.services.session_outcome_emitter import (
    AuditLog,
    SessionOutcomeEmitter,
)
from sceau.application.use_cases.create_sign_in_data import CreateSignInData
from sceau.application.use_cases.verify_sign_in import VerifySignIn
from sceau.config.settings import Settings, get_settings
from sceau.domain.services.i_nonce_store import INonceStore
from sceau.domain.services.i_signature_verifier import ISignatureVerifier
from sceau.infrastructure.auth.solana_signature_verifier import (
    SolanaSignatureVerifier,
)
from sceau.infrastructure.cache.in_memory_nonce_store import InMemoryNonceStore
from sceau.infrastructure.cache.redis_nonce_store import RedisNonceStore


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of services. Use cases are cheap and
    built per request from the shared singletons.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize container with None instances.

        Args:
            settings: Settings to build services from (global if None)
        """
        self.settings = settings or get_settings()

        # Infrastructure
        self._nonce_store: Optional[INonceStore] = None

        # Domain Services
        self._signature_verifier: Optional[ISignatureVerifier] = None

        # Application Services
        self._audit_log: Optional[AuditLog] = None
        self._outcome_emitter: Optional[SessionOutcomeEmitter] = None

    async def initialize(self) -> None:
        """Initialize services and establish connections."""
        await self.nonce_store.connect()

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._nonce_store:
            await self._nonce_store.disconnect()

    # Infrastructure Getters

    @property
    def nonce_store(self) -> INonceStore:
        """Get nonce store (Redis if enabled, else in-memory)."""
        if self._nonce_store is None:
            settings = self.settings
            if settings.REDIS_ENABLED:
                self._nonce_store = RedisNonceStore(
                    host=settings.REDIS_HOST,
                    port=settings.REDIS_PORT,
                    db=settings.REDIS_DB,
                    password=settings.REDIS_PASSWORD,
                    key_prefix=settings.REDIS_KEY_PREFIX,
                    require_issued=settings.REQUIRE_ISSUED_NONCE,
                    timeout=settings.NONCE_STORE_TIMEOUT,
                )
            else:
                self._nonce_store = InMemoryNonceStore(
                    require_issued=settings.REQUIRE_ISSUED_NONCE,
                )
        return self._nonce_store

    # Domain Service Getters

    @property
    def signature_verifier(self) -> ISignatureVerifier:
        """Get signature verifier instance."""
        if self._signature_verifier is None:
            self._signature_verifier = SolanaSignatureVerifier()
        return self._signature_verifier

    # Application Service Getters

    @property
    def audit_log(self) -> AuditLog:
        """Get audit log instance."""
        if self._audit_log is None:
            self._audit_log = AuditLog()
        return self._audit_log

    @property
    def outcome_emitter(self) -> SessionOutcomeEmitter:
        """Get session outcome emitter instance."""
        if self._outcome_emitter is None:
            self._outcome_emitter = SessionOutcomeEmitter(self.audit_log)
        return self._outcome_emitter

    # Use Case Factories

    def get_create_sign_in_data(self) -> CreateSignInData:
        """Build challenge generator."""
        settings = self.settings
        return CreateSignInData(
            statement=settings.CHALLENGE_STATEMENT,
            ttl_seconds=settings.CHALLENGE_TTL_SECONDS,
            nonce_store=self.nonce_store,
            expected_domain=settings.EXPECTED_DOMAIN,
            chain_id=settings.CHAIN_ID,
            resources=settings.CHALLENGE_RESOURCES,
        )

    def get_verify_sign_in(self) -> VerifySignIn:
        """Build verifier."""
        settings = self.settings
        return VerifySignIn(
            signature_verifier=self.signature_verifier,
            expected_domain=settings.EXPECTED_DOMAIN,
            max_window_seconds=settings.MAX_WINDOW_SECONDS,
            nonce_store=self.nonce_store,
            nonce_ttl_seconds=settings.MAX_WINDOW_SECONDS,
        )


# Global container instance
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def set_container(container: Optional[DIContainer]) -> None:
    """Replace global container (app factory and tests)."""
    global _container
    _container = container


async def initialize_container() -> None:
    """Initialize global container."""
    await get_container().initialize()


async def shutdown_container() -> None:
    """Shutdown global container."""
    if _container is not None:
        await _container.shutdown()
