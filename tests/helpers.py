"""
Shared test helpers: fixed keys, a settable clock and wallet-style signing.
"""

from datetime import datetime, timedelta

from sceau.domain.entities.challenge import Challenge
from sceau.domain.entities.sign_in_output import SignInOutput
from sceau.domain.services.i_signing_capability import ISigningCapability
from sceau.domain.services.message_canonicalizer import canonicalize
from sceau.presentation.schemas.sign_in_schemas import SignInOutputWire

EXPECTED_DOMAIN = "example.com"

# Deterministic test keys (Ed25519 seeds)
ALICE_SEED = bytes(range(32))
BOB_SEED = bytes(range(32, 64))


class FrozenClock:
    """Settable UTC clock for window checks."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


async def sign_challenge(
    signer: ISigningCapability, challenge: Challenge
) -> SignInOutput:
    """Sign challenge the way a wallet does."""
    return await signer.sign(canonicalize(challenge, signer.address))


def verify_payload(challenge: Challenge, output: SignInOutput) -> dict:
    """Build /verifySIWS request body."""
    return {
        "input": challenge.to_wire(),
        "output": SignInOutputWire.from_domain(output).model_dump(by_alias=True),
    }


class FakeMonotonic:
    """Settable monotonic clock (seconds) for nonce stores."""

    def __init__(self, value: float = 1000.0):
        self.value = value

    def __call__(self) -> float:
        return self.value
