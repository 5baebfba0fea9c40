"""
VerificationRecord value object - auditable outcome of one attempt.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

from sceau.domain.value_objects.timestamp import format_timestamp, utc_now


class RecordStatus(str, Enum):
    """Outcome status of an attempt."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class VerificationRecord:
    """
    Immutable audit record.

    Created once per attempt and appended to the audit log.

    Attributes:
        status: success or error
        method: Operation that produced the record
            (e.g. "signIn", "signMessage", "connect", "disconnect")
        message: Human-readable detail
        recorded_at: Creation time (UTC)
    """

    status: RecordStatus
    method: str
    message: str
    recorded_at: datetime = field(default_factory=utc_now)

    @property
    def is_success(self) -> bool:
        """Check if the attempt succeeded."""
        return self.status == RecordStatus.SUCCESS

    def to_dict(self) -> dict:
        """Convert to JSON-friendly dictionary."""
        data = asdict(self)
        data["status"] = self.status.value
        data["recorded_at"] = format_timestamp(self.recorded_at)
        return data
