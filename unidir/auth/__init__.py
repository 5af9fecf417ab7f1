"""Authentication and access control for the directory.

Provides token issuance, password hashing, token revocation and the
access gate placed in front of entity routes.
"""

from unidir.auth.gate import AccessGate, Principal, get_current_principal
from unidir.auth.passwords import PasswordHasher
from unidir.auth.revocation import RevocationRegistry, RevocationSweeper
from unidir.auth.tokens import TokenClaims, TokenConfig, TokenService

__all__ = [
    "AccessGate",
    "Principal",
    "get_current_principal",
    "PasswordHasher",
    "RevocationRegistry",
    "RevocationSweeper",
    "TokenClaims",
    "TokenConfig",
    "TokenService",
]
