"""
Domain value objects.
"""

from sceau.domain.value_objects.timestamp import (
    format_timestamp,
    to_utc_millis,
    utc_now,
)
from sceau.domain.value_objects.verification_record import (
    RecordStatus,
    VerificationRecord,
)
from sceau.domain.value_objects.verified_identity import VerifiedIdentity

__all__ = [
    "format_timestamp",
    "to_utc_millis",
    "utc_now",
    "RecordStatus",
    "VerificationRecord",
    "VerifiedIdentity",
]
