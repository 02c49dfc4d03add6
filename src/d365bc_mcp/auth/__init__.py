"""
Authentication module for the Business Central client

Handles Azure AD client-credentials authentication for Business Central access.
"""

from .interface import IAuthProvider, AuthenticationError
from .bc_auth import BCAuthManager, DEFAULT_TOKEN_SCOPE

__all__ = [
    "IAuthProvider",
    "AuthenticationError",
    "BCAuthManager",
    "DEFAULT_TOKEN_SCOPE",
]
