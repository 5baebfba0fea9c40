"""
Domain entities.
"""

from sceau.domain.entities.challenge import SIWS_VERSION, Challenge
from sceau.domain.entities.sign_in_output import SignInAccount, SignInOutput

__all__ = [
    "SIWS_VERSION",
    "Challenge",
    "SignInAccount",
    "SignInOutput",
]
