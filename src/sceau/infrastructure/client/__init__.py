"""
Sign-in service client.
"""

from sceau.infrastructure.client.sign_in_client import SignInClient

__all__ = ["SignInClient"]
