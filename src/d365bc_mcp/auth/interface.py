"""
Authentication Provider Interface

Defines contract for token providers (Azure AD client credentials, mock)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from ..errors import BCClientError


class IAuthProvider(ABC):
    """Interface for authentication providers"""

    @abstractmethod
    def authenticate(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """
        Exchange client credentials for a bearer token.

        Args:
            tenant_id: Azure AD tenant (directory) id
            client_id: App registration client id
            client_secret: App registration client secret

        Returns:
            Bearer token for Business Central API access

        Raises:
            AuthenticationError: If the token exchange fails
        """
        pass

    @abstractmethod
    def get_provider_info(self) -> Dict[str, Any]:
        """
        Get information about the auth provider.

        Returns:
            Provider metadata (type, scope, etc.)
        """
        pass


class AuthenticationError(BCClientError):
    """Token exchange failed"""
    pass
