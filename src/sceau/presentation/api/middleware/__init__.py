"""
API middleware.
"""

from sceau.presentation.api.middleware.error_handler import (
    sceau_exception_handler,
    validation_exception_handler,
)
from sceau.presentation.api.middleware.metrics_middleware import (
    MetricsMiddleware,
)
from sceau.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)

__all__ = [
    "sceau_exception_handler",
    "validation_exception_handler",
    "MetricsMiddleware",
    "RequestIDMiddleware",
]
