"""
Application use cases.
"""

from sceau.application.use_cases.create_sign_in_data import CreateSignInData
from sceau.application.use_cases.verify_sign_in import VerifySignIn

__all__ = [
    "CreateSignInData",
    "VerifySignIn",
]
