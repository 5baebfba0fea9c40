"""
Sceau - Sign-In-With-Solana verification service.

Issues domain-bound sign-in challenges and verifies wallet signatures
over their canonical text.
"""

__version__ = "0.1.0"
