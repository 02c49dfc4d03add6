"""
Authentication Provider Factory

Creates auth provider instances based on configuration.
"""

from typing import Dict, Any
import structlog

from ..config import Settings
from ..auth import IAuthProvider, BCAuthManager, AuthenticationError

logger = structlog.get_logger(__name__)


class MockAuthProvider(IAuthProvider):
    """Mock auth provider for offline runs and tests"""

    def __init__(self):
        self.mock_token = "mock_bearer_token_12345"

    def authenticate(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """Returns mock token for any non-empty credentials"""
        if not tenant_id or not client_id or not client_secret:
            raise AuthenticationError("tenant_id, client_id and client_secret are all required")
        return self.mock_token

    def get_provider_info(self) -> Dict[str, Any]:
        """Returns mock provider info"""
        return {
            "type": "mock",
            "mock_token": self.mock_token[:20] + "...",
            "status": "active"
        }


class AuthProviderFactory:
    """Factory for creating authentication providers"""

    @staticmethod
    def create(settings: Settings) -> IAuthProvider:
        """
        Create auth provider based on configuration.

        Args:
            settings: Application settings

        Returns:
            Configured auth provider instance

        Raises:
            ValueError: If provider type is not supported
        """
        provider_type = settings.auth_provider.lower()

        logger.info("Creating auth provider", provider_type=provider_type)

        if provider_type == "azure_ad":
            return BCAuthManager(scope=settings.bc_token_scope)
        elif provider_type == "mock":
            return MockAuthProvider()
        else:
            raise ValueError(f"Unsupported auth provider: {provider_type}")

    @staticmethod
    def get_available_providers() -> list[str]:
        """Get list of available auth provider types"""
        return ["azure_ad", "mock"]
