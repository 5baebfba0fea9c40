"""
Session outcome emitter.

Turns each attempt's outcome into an immutable VerificationRecord,
appends it to the ordered audit log and reports it to logs and metrics.
The audit log is the only thing UI-facing collaborators consume.
"""

import threading
from typing import Any, Callable, List

from sceau.domain.value_objects.verification_record import (
    RecordStatus,
    VerificationRecord,
)
from sceau.infrastructure.monitoring import get_logger, get_request_id
from sceau.infrastructure.monitoring import metrics

logger = get_logger(__name__)

RecordListener = Callable[[VerificationRecord], None]


class AuditLog:
    """
    Append-only, ordered log of verification records.

    Thread-safe. Records are never mutated or removed except by clear().
    """

    def __init__(self):
        self._records: List[VerificationRecord] = []
        self._listeners: List[RecordListener] = []
        self._lock = threading.Lock()

    def append(self, record: VerificationRecord) -> None:
        """
        Append record and notify subscribers.

        A failing subscriber is logged and skipped.
        """
        with self._lock:
            self._records.append(record)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(record)
            except Exception:
                logger.exception("Audit log listener failed")

    def subscribe(self, listener: RecordListener) -> Callable[[], None]:
        """
        Register listener for new records.

        Returns:
            Function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def records(self) -> List[VerificationRecord]:
        """Snapshot of all records in insertion order."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        """Drop all records (e.g. when the UI clears its log)."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


def describe_outcome(outcome: Any) -> str:
    """Human-readable description of an outcome value or error."""
    if isinstance(outcome, BaseException):
        message = getattr(outcome, "message", None) or str(outcome)
        return message or type(outcome).__name__
    if hasattr(outcome, "describe"):
        return outcome.describe()
    if outcome is None:
        return "OK"
    return str(outcome)


class SessionOutcomeEmitter:
    """
    Maps outcomes to audit records.

    record() never raises: whatever happens, a record is produced.
    """

    def __init__(self, audit_log: AuditLog = None):
        """
        Initialize emitter.

        Args:
            audit_log: Log receiving records (new one if None)
        """
        self.audit_log = audit_log if audit_log is not None else AuditLog()

    def record(self, method: str, outcome: Any = None) -> VerificationRecord:
        """
        Record outcome of one attempt.

        Args:
            method: Operation name ("signIn", "signMessage", "connect", ...)
            outcome: Result value on success, exception instance on failure

        Returns:
            The appended VerificationRecord
        """
        status = (
            RecordStatus.ERROR
            if isinstance(outcome, BaseException)
            else RecordStatus.SUCCESS
        )

        try:
            message = describe_outcome(outcome)
        except Exception:
            message = type(outcome).__name__

        record = VerificationRecord(status=status, method=method, message=message)

        try:
            self.audit_log.append(record)
            metrics.audit_records_total.labels(
                method=method, status=status.value
            ).inc()
        except Exception:
            logger.exception(f"Failed to append audit record for {method}")

        audit = {
            "audit": {
                "method": method,
                "status": status.value,
                "request_id": get_request_id(),
            }
        }
        if status == RecordStatus.SUCCESS:
            logger.info(f"{method}: {message}", extra=audit)
        else:
            logger.warning(f"{method} failed: {message}", extra=audit)

        return record
