"""
API routes.
"""

from sceau.presentation.api.routes import health, sign_in

__all__ = ["health", "sign_in"]
