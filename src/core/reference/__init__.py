"""
Static reference data (pharmacy profiles and identity tokens).
"""

from .pharmacies import IDENTITY_TOKENS, PHARMACIES, detect_pharmacy, get_profile

__all__ = [
    "PHARMACIES",
    "IDENTITY_TOKENS",
    "detect_pharmacy",
    "get_profile",
]
