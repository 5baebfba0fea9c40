"""
Test fixtures and configuration.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Generator

import httpx
import pytest
import pytest_asyncio

from sceau.config.settings import Settings, override_settings, reset_settings
from sceau.di import DIContainer, set_container
from sceau.domain.entities.challenge import Challenge
from sceau.infrastructure.auth.keypair_signer import KeypairSigner
from sceau.infrastructure.cache.in_memory_nonce_store import InMemoryNonceStore
from sceau.main import create_app
from tests.helpers import ALICE_SEED, BOB_SEED, EXPECTED_DOMAIN, FrozenClock


@pytest.fixture
def issued_at() -> datetime:
    """Fixed issuance time T."""
    return datetime(2024, 4, 11, 5, 46, 45, 457000, tzinfo=timezone.utc)


@pytest.fixture
def clock(issued_at: datetime) -> FrozenClock:
    """Clock starting one second after T."""
    return FrozenClock(issued_at + timedelta(seconds=1))


@pytest.fixture
def alice() -> KeypairSigner:
    """Alice's signing capability."""
    return KeypairSigner.from_seed(ALICE_SEED)


@pytest.fixture
def bob() -> KeypairSigner:
    """Bob's signing capability."""
    return KeypairSigner.from_seed(BOB_SEED)


@pytest.fixture
def make_challenge(issued_at: datetime) -> Callable[..., Challenge]:
    """Factory for challenges bound to example.com."""

    def _make(**overrides) -> Challenge:
        fields = {
            "domain": EXPECTED_DOMAIN,
            "statement": "Sign in",
            "uri": "https://example.com/login",
            "version": "1",
            "nonce": "n1-0123456789abcdef",
            "issued_at": issued_at,
        }
        fields.update(overrides)
        return Challenge(**fields)

    return _make


@pytest.fixture
def nonce_store() -> InMemoryNonceStore:
    """Strict in-memory nonce store."""
    return InMemoryNonceStore(require_issued=True)


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Settings for API tests (no YAML, in-memory nonce store)."""
    settings = Settings(
        ENV="test",
        EXPECTED_DOMAIN=EXPECTED_DOMAIN,
        CHALLENGE_STATEMENT="Sign in",
        CHAIN_ID="solana:mainnet",
        REDIS_ENABLED=False,
        LOG_LEVEL="WARNING",
        CORS_ORIGINS=["https://example.com"],
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def container(test_settings: Settings) -> Generator[DIContainer, None, None]:
    """DI container built from test settings."""
    container = DIContainer(test_settings)
    yield container
    set_container(None)


@pytest_asyncio.fixture
async def client(
    test_settings: Settings, container: DIContainer
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Provide HTTP client for API testing.

    Runs the app in-process through ASGI transport.
    """
    app = create_app(test_settings, container=container)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="https://example.com"
    ) as client:
        yield client
