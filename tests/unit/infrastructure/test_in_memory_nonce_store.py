"""
Unit tests for InMemoryNonceStore.

Usage:
    pytest tests/unit/infrastructure/test_in_memory_nonce_store.py
"""

import asyncio

from sceau.infrastructure.cache.in_memory_nonce_store import InMemoryNonceStore
from tests.base import SceauTest
from tests.helpers import FakeMonotonic


class TestInMemoryNonceStore(SceauTest):
    """Unit tests for InMemoryNonceStore."""

    component_name = "sceau"
    test_category = "unit"

    # ============================================================
    # Strict mode tests
    # ============================================================

    async def test_consume_issued_once(self):
        """Test issued nonce is consumed exactly once."""
        self.reporter.info("Testing single consumption", context="Test")

        store = InMemoryNonceStore()
        await store.issue("nonce-0001", 60)

        assert await store.consume("nonce-0001", 60) is True
        assert await store.consume("nonce-0001", 60) is False

    async def test_unissued_nonce_rejected(self):
        """Test strict store refuses unknown nonces."""
        self.reporter.info("Testing unknown nonce", context="Test")

        store = InMemoryNonceStore(require_issued=True)

        assert await store.consume("nonce-unknown", 60) is False

    async def test_issued_nonce_expires(self):
        """Test issued nonce cannot be consumed after its TTL."""
        self.reporter.info("Testing issued expiry", context="Test")

        clock = FakeMonotonic()
        store = InMemoryNonceStore(clock=clock)
        await store.issue("nonce-0001", 10)

        clock.value += 11

        assert await store.consume("nonce-0001", 60) is False
        assert len(store) == 0

    async def test_concurrent_consume_single_winner(self):
        """Test concurrent consumers of one nonce get one success."""
        self.reporter.info("Testing concurrent consume", context="Test")

        store = InMemoryNonceStore()
        await store.issue("nonce-0001", 60)

        results = await asyncio.gather(
            *[store.consume("nonce-0001", 60) for _ in range(20)]
        )

        assert results.count(True) == 1

    # ============================================================
    # Lenient mode tests
    # ============================================================

    async def test_lenient_accepts_unknown_once(self):
        """Test lenient store accepts any nonce once."""
        self.reporter.info("Testing lenient mode", context="Test")

        store = InMemoryNonceStore(require_issued=False)

        assert await store.consume("client-nonce-1", 60) is True
        assert await store.consume("client-nonce-1", 60) is False

    async def test_consumed_marker_expires(self):
        """Test consumed marker is purged after its TTL."""
        self.reporter.info("Testing consumed expiry", context="Test")

        clock = FakeMonotonic()
        store = InMemoryNonceStore(require_issued=False, clock=clock)
        await store.consume("client-nonce-1", 10)

        clock.value += 11

        assert len(store) == 0

    async def test_ping(self):
        """Test in-memory store is always reachable."""
        self.reporter.info("Testing ping", context="Test")

        assert await InMemoryNonceStore().ping() is True
