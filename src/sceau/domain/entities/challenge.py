"""
Challenge entity - the structured, unsigned invitation to sign in.

Mirrors the Sign-In-With-Solana input: wire names are camelCase
(issuedAt, chainId, ...), Python attributes are snake_case.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from sceau.domain.value_objects.timestamp import format_timestamp, to_utc_millis

SIWS_VERSION = "1"

_LINE_BREAKS = ("\r", "\n")


def _single_line(value: Optional[str], field_name: str) -> Optional[str]:
    if value is not None and any(ch in value for ch in _LINE_BREAKS):
        raise ValueError(f"{field_name} must not contain line breaks")
    return value


class Challenge(BaseModel):
    """
    Sign-in challenge bound to a domain and a single-use nonce.

    Business rules:
    - Frozen once built
    - No field may contain a line break, so every field occupies
      exactly one line of the canonical message
    - Timestamps are UTC with millisecond precision
    - Absent optional fields are None, never empty strings
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    domain: str = Field(..., min_length=1, description="Issuing host")
    statement: str = Field(..., min_length=1, description="Purpose text")
    uri: str = Field(..., min_length=1, description="Origin URI")
    version: str = Field(default=SIWS_VERSION, min_length=1)
    chain_id: Optional[str] = Field(default=None, min_length=1)
    nonce: str = Field(..., min_length=1, description="Single-use token")
    issued_at: datetime
    expiration_time: Optional[datetime] = None
    not_before: Optional[datetime] = None
    request_id: Optional[str] = Field(default=None, min_length=1)
    resources: Optional[Tuple[str, ...]] = None

    @field_validator(
        "statement", "uri", "version", "chain_id", "nonce", "request_id"
    )
    @classmethod
    def validate_single_line(
        cls, v: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        """Reject values that would span several message lines."""
        return _single_line(v, info.field_name)

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Domain is a bare authority: no whitespace at all."""
        if any(ch.isspace() for ch in v):
            raise ValueError("domain must not contain whitespace")
        return v

    @field_validator("resources")
    @classmethod
    def validate_resources(
        cls, v: Optional[Tuple[str, ...]]
    ) -> Optional[Tuple[str, ...]]:
        """Each resource is a non-empty single line."""
        if v is None:
            return v
        for resource in v:
            if not resource:
                raise ValueError("resources must not contain empty values")
            _single_line(resource, "resources")
        return v

    @field_validator("issued_at", "expiration_time", "not_before")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store timestamps as aware UTC, millisecond precision."""
        if v is None:
            return v
        return to_utc_millis(v)

    @field_serializer("issued_at", "expiration_time", "not_before")
    def serialize_timestamp(self, v: Optional[datetime]) -> Optional[str]:
        if v is None:
            return None
        return format_timestamp(v)

    def window_start(self) -> datetime:
        """Earliest instant the challenge may be verified."""
        return self.not_before or self.issued_at

    def window_end(self, max_window: timedelta) -> datetime:
        """Latest instant the challenge may be verified."""
        return self.expiration_time or self.issued_at + max_window

    def to_wire(self) -> dict:
        """Serialize to the JSON wire format (absent fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
