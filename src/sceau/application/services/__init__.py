"""
Application services.
"""

from sceau.application.services.session_outcome_emitter import (
    AuditLog,
    SessionOutcomeEmitter,
    describe_outcome,
)

__all__ = [
    "AuditLog",
    "SessionOutcomeEmitter",
    "describe_outcome",
]
