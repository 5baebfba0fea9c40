"""
Sign-in API schemas.

Binary values travel as JSON arrays of byte values (0-255).
"""
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sceau.domain.entities.challenge import Challenge
from sceau.domain.entities.sign_in_output import SignInAccount, SignInOutput

ByteValue = Annotated[int, Field(ge=0, le=255)]

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ================================================================
# Create Sign-In Data Schemas
# ================================================================


class CreateSignInDataRequest(WireModel):
    """Request for a fresh sign-in challenge."""

    uri: str = Field(..., min_length=1, description="URI of the requesting page")


# ================================================================
# Verify Sign-In Schemas
# ================================================================


class SignInAccountWire(WireModel):
    """Signing account as sent by the wallet."""

    public_key: List[ByteValue] = Field(
        ...,
        min_length=PUBLIC_KEY_LENGTH,
        max_length=PUBLIC_KEY_LENGTH,
        description="Ed25519 public key bytes",
    )
    address: Optional[str] = Field(
        None, description="Base58 address claimed by the wallet (ignored)"
    )


class SignInOutputWire(WireModel):
    """Wallet sign-in output with byte arrays."""

    account: SignInAccountWire
    signature: List[ByteValue] = Field(
        ...,
        min_length=SIGNATURE_LENGTH,
        max_length=SIGNATURE_LENGTH,
        description="Ed25519 signature bytes",
    )
    signed_message: List[ByteValue] = Field(
        ..., min_length=1, description="Bytes the wallet signed"
    )

    def to_domain(self) -> SignInOutput:
        """Convert byte arrays to domain SignInOutput."""
        return SignInOutput(
            account=SignInAccount(public_key=bytes(self.account.public_key)),
            signature=bytes(self.signature),
            signed_message=bytes(self.signed_message),
        )

    @classmethod
    def from_domain(cls, output: SignInOutput) -> "SignInOutputWire":
        """Convert domain SignInOutput to byte arrays."""
        return cls(
            account=SignInAccountWire(
                public_key=list(output.account.public_key),
                address=output.account.address,
            ),
            signature=list(output.signature),
            signed_message=list(output.signed_message),
        )


class VerifySignInRequest(WireModel):
    """Challenge plus the proof answering it."""

    input: Challenge
    output: SignInOutputWire


class VerifySignInResponse(WireModel):
    """Verification outcome."""

    ok: bool = Field(..., description="Sign-in verified")
    error: Optional[str] = Field(None, description="Failure kind")
    address: Optional[str] = Field(None, description="Verified account address")
