"""
Unit tests for VerifySignIn use case.

Tests the ordered checks: domain, freshness, nonce, message, signature.

Usage:
    pytest tests/unit/application/test_verify_sign_in.py
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from sceau.application.use_cases.verify_sign_in import VerifySignIn
from sceau.domain.entities.sign_in_output import SignInAccount, SignInOutput
from sceau.domain.exceptions import (
    BadSignatureError,
    ChallengeExpiredError,
    DomainMismatchError,
    MessageMismatchError,
    NonceReusedError,
)
from sceau.domain.services.message_canonicalizer import canonicalize
from sceau.infrastructure.auth.solana_signature_verifier import (
    SolanaSignatureVerifier,
)
from sceau.infrastructure.cache.in_memory_nonce_store import InMemoryNonceStore
from sceau.infrastructure.cache.redis_nonce_store import RedisNonceStore
from tests.base import SceauTest
from tests.helpers import FakeMonotonic, sign_challenge

NONCE = "n1-0123456789abcdef"


class TestVerifySignIn(SceauTest):
    """Unit tests for VerifySignIn use case."""

    component_name = "sceau"
    test_category = "unit"

    @pytest.fixture(autouse=True)
    async def _issue_nonce(self, nonce_store):
        await nonce_store.issue(NONCE, 600)

    def make_use_case(self, clock, nonce_store=None, **kwargs):
        return VerifySignIn(
            signature_verifier=SolanaSignatureVerifier(),
            expected_domain="example.com",
            max_window_seconds=600,
            nonce_store=nonce_store,
            clock=clock,
            **kwargs,
        )

    # ============================================================
    # Success tests
    # ============================================================

    async def test_verify_success(self, alice, make_challenge, clock, nonce_store):
        """Test valid proof yields the signer identity."""
        self.reporter.info("Testing successful verification", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        identity = await use_case.execute(challenge, output)

        assert identity.address == alice.address
        assert identity.public_key == alice.public_key
        assert identity.verified_at == clock.now

        self.reporter.info(f"Verified {identity.address}", context="Test")

    async def test_expected_domain_override(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test per-call expected domain override."""
        self.reporter.info("Testing domain override", context="Test")

        challenge = make_challenge(domain="localhost:3000")
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        identity = await use_case.execute(
            challenge, output, expected_domain="localhost:3000"
        )

        assert identity.address == alice.address

    # ============================================================
    # Domain tests
    # ============================================================

    async def test_domain_forgery_rejected(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test challenge for another domain is rejected before nonce use."""
        self.reporter.info("Testing domain forgery", context="Test")

        challenge = make_challenge(domain="evil.com")
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(DomainMismatchError) as exc_info:
            await use_case.execute(challenge, output)

        assert exc_info.value.expected == "example.com"
        assert exc_info.value.actual == "evil.com"
        # Nonce untouched
        assert await nonce_store.consume(NONCE, 600) is True

    # ============================================================
    # Freshness tests
    # ============================================================

    async def test_just_before_expiry_passes(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test verification one second before expiry succeeds."""
        self.reporter.info("Testing before expiry", context="Test")

        challenge = make_challenge(expiration_time=issued_at + timedelta(seconds=600))
        output = await sign_challenge(alice, challenge)
        clock.now = issued_at + timedelta(seconds=599)
        use_case = self.make_use_case(clock, nonce_store)

        identity = await use_case.execute(challenge, output)

        assert identity.address == alice.address

    async def test_window_end_is_inclusive(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test verification exactly at expiry succeeds."""
        self.reporter.info("Testing expiry boundary", context="Test")

        expires = issued_at + timedelta(seconds=600)
        challenge = make_challenge(expiration_time=expires)
        output = await sign_challenge(alice, challenge)
        clock.now = expires
        use_case = self.make_use_case(clock, nonce_store)

        identity = await use_case.execute(challenge, output)

        assert identity.address == alice.address

    async def test_expired_rejected(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test verification after expiry fails without consuming nonce."""
        self.reporter.info("Testing expired challenge", context="Test")

        challenge = make_challenge(expiration_time=issued_at + timedelta(seconds=600))
        output = await sign_challenge(alice, challenge)
        clock.now = issued_at + timedelta(seconds=601)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(ChallengeExpiredError):
            await use_case.execute(challenge, output)

        assert await nonce_store.consume(NONCE, 600) is True

    async def test_max_window_applies_without_expiration(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test challenge without expirationTime uses the max window."""
        self.reporter.info("Testing max window", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        clock.now = issued_at + timedelta(seconds=601)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(ChallengeExpiredError):
            await use_case.execute(challenge, output)

    async def test_not_before_in_future_rejected(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test challenge is not valid before notBefore."""
        self.reporter.info("Testing notBefore", context="Test")

        challenge = make_challenge(not_before=issued_at + timedelta(seconds=60))
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(ChallengeExpiredError):
            await use_case.execute(challenge, output)

    async def test_issued_in_future_rejected(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test challenge issued after now is rejected."""
        self.reporter.info("Testing future issuedAt", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        clock.now = issued_at - timedelta(seconds=1)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(ChallengeExpiredError):
            await use_case.execute(challenge, output)

    # ============================================================
    # Nonce tests
    # ============================================================

    async def test_replay_rejected(self, alice, make_challenge, clock, nonce_store):
        """Test second submission of the same proof is rejected."""
        self.reporter.info("Testing replay", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        await use_case.execute(challenge, output)

        with pytest.raises(NonceReusedError) as exc_info:
            await use_case.execute(challenge, output)

        assert exc_info.value.nonce == NONCE

    async def test_unissued_nonce_rejected(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test nonce never issued by this server is rejected."""
        self.reporter.info("Testing unissued nonce", context="Test")

        challenge = make_challenge(nonce="self-made-nonce-0001")
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(NonceReusedError):
            await use_case.execute(challenge, output)

    async def test_concurrent_submissions_single_success(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test only one of many concurrent verifications succeeds."""
        self.reporter.info("Testing concurrent verification", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        results = await asyncio.gather(
            *[use_case.execute(challenge, output) for _ in range(10)],
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, NonceReusedError)]
        assert len(successes) == 1
        assert len(failures) == 9

    async def test_without_store_replay_allowed_in_window(
        self, alice, make_challenge, clock
    ):
        """Test window-only mode accepts repeated proofs."""
        self.reporter.info("Testing window-only mode", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store=None)

        await use_case.execute(challenge, output)
        identity = await use_case.execute(challenge, output)

        assert identity.address == alice.address

    async def test_nonce_ttl_defaults_to_window(
        self, alice, make_challenge, clock
    ):
        """Test consumed nonces are remembered for the max window."""
        self.reporter.info("Testing nonce TTL", context="Test")

        mock_store = AsyncMock()
        mock_store.consume.return_value = True
        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, mock_store)

        await use_case.execute(challenge, output)

        mock_store.consume.assert_awaited_once_with(NONCE, 600)

    async def test_long_window_replay_rejected_in_memory(
        self, alice, make_challenge, clock, issued_at
    ):
        """Test consumed nonce outlives the max window for longer challenges."""
        self.reporter.info("Testing long window replay (memory)", context="Test")

        store_clock = FakeMonotonic()
        lenient = InMemoryNonceStore(require_issued=False, clock=store_clock)
        challenge = make_challenge(expiration_time=issued_at + timedelta(hours=1))
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, lenient)

        await use_case.execute(challenge, output)

        store_clock.value += 700
        clock.advance(700)

        with pytest.raises(NonceReusedError):
            await use_case.execute(challenge, output)

    async def test_long_window_retention_redis(
        self, alice, make_challenge, clock, issued_at
    ):
        """Test Redis marker expiry covers the whole challenge window."""
        self.reporter.info("Testing long window retention (redis)", context="Test")

        client = AsyncMock()
        client.set.return_value = True
        lenient = RedisNonceStore(require_issued=False, client=client)
        challenge = make_challenge(expiration_time=issued_at + timedelta(hours=1))
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, lenient)

        await use_case.execute(challenge, output)

        # Verified at T+1s, window ends at T+3600s
        client.set.assert_awaited_once_with(
            f"sceau:nonce:used:{NONCE}", "1", nx=True, ex=3600
        )

    # ============================================================
    # Message tests
    # ============================================================

    async def test_tampered_challenge_field_rejected(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test editing a challenge field after signing is detected."""
        self.reporter.info("Testing tampered statement", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        tampered = challenge.model_copy(update={"statement": "Transfer all funds"})
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(MessageMismatchError):
            await use_case.execute(tampered, output)

    async def test_signed_message_not_trusted(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test valid signature over other bytes is rejected."""
        self.reporter.info("Testing substituted message", context="Test")

        challenge = make_challenge()
        output = await alice.sign(b"Please sign this harmless text")
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(MessageMismatchError):
            await use_case.execute(challenge, output)

    async def test_message_bound_to_account(
        self, alice, bob, make_challenge, clock, nonce_store
    ):
        """Test message signed for Alice cannot be claimed by Bob."""
        self.reporter.info("Testing account binding", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        stolen = SignInOutput(
            account=SignInAccount(public_key=bob.public_key),
            signature=output.signature,
            signed_message=output.signed_message,
        )
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(MessageMismatchError):
            await use_case.execute(challenge, stolen)

    async def test_flipped_signed_message_byte_rejected(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test single flipped byte in signed_message is detected."""
        self.reporter.info("Testing flipped signed_message byte", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        signed_message = bytearray(output.signed_message)
        signed_message[len(signed_message) // 2] ^= 0x01
        tampered = SignInOutput(
            account=output.account,
            signature=output.signature,
            signed_message=bytes(signed_message),
        )
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(MessageMismatchError):
            await use_case.execute(challenge, tampered)

    # ============================================================
    # Signature tests
    # ============================================================

    async def test_tampered_signature_rejected(
        self, alice, make_challenge, clock, nonce_store
    ):
        """Test single flipped signature bit is detected."""
        self.reporter.info("Testing tampered signature", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        signature = bytearray(output.signature)
        signature[0] ^= 0x01
        tampered = SignInOutput(
            account=output.account,
            signature=bytes(signature),
            signed_message=output.signed_message,
        )
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(BadSignatureError) as exc_info:
            await use_case.execute(challenge, tampered)

        assert exc_info.value.address == alice.address

    async def test_substituted_key_rejected(
        self, alice, bob, make_challenge, clock, nonce_store
    ):
        """Test Alice's signature does not verify under Bob's key."""
        self.reporter.info("Testing substituted key", context="Test")

        challenge = make_challenge()
        output = await sign_challenge(alice, challenge)
        forged = SignInOutput(
            account=SignInAccount(public_key=bob.public_key),
            signature=output.signature,
            signed_message=canonicalize(challenge, bob.address),
        )
        use_case = self.make_use_case(clock, nonce_store)

        with pytest.raises(BadSignatureError):
            await use_case.execute(challenge, forged)

    # ============================================================
    # End-to-end scenario
    # ============================================================

    async def test_short_client_nonce_scenario(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test challenge with nonce "n1" verifies one second after issue."""
        self.reporter.info("Testing short nonce scenario", context="Test")

        await nonce_store.issue("n1", 600)
        challenge = make_challenge(nonce="n1", statement="Sign in")
        output = await sign_challenge(alice, challenge)
        use_case = self.make_use_case(clock, nonce_store)

        identity = await use_case.execute(challenge, output)

        assert clock.now == issued_at + timedelta(seconds=1)
        assert identity.address == alice.address

        with pytest.raises(NonceReusedError):
            await use_case.execute(challenge, output)

    async def test_sign_in_scenario(
        self, alice, make_challenge, clock, issued_at, nonce_store
    ):
        """Test success, replay, domain forgery and expiry in sequence."""
        self.reporter.info("Testing sign-in scenario", context="Test")

        use_case = self.make_use_case(clock, nonce_store)
        challenge = make_challenge(expiration_time=issued_at + timedelta(seconds=600))
        output = await sign_challenge(alice, challenge)

        # 1. Success
        identity = await use_case.execute(challenge, output)
        assert identity.address == alice.address

        # 2. Replay
        with pytest.raises(NonceReusedError):
            await use_case.execute(challenge, output)

        # 3. Domain forgery with a fresh nonce
        await nonce_store.issue("n2-0123456789abcdef", 600)
        forged = make_challenge(domain="evil.com", nonce="n2-0123456789abcdef")
        with pytest.raises(DomainMismatchError):
            await use_case.execute(forged, await sign_challenge(alice, forged))

        # 4. Late verification with a fresh nonce
        await nonce_store.issue("n3-0123456789abcdef", 600)
        late = make_challenge(
            nonce="n3-0123456789abcdef",
            expiration_time=issued_at + timedelta(seconds=600),
        )
        late_output = await sign_challenge(alice, late)
        clock.now = issued_at + timedelta(seconds=601)
        with pytest.raises(ChallengeExpiredError):
            await use_case.execute(late, late_output)
