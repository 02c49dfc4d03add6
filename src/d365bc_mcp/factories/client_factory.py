"""
Business Central Client Factory

Creates client instances and bootstraps their session scope from configuration.
"""

from typing import Optional
import httpx
import structlog

from ..config import Settings
from ..auth import IAuthProvider
from ..client import BCClient, Verbosity

logger = structlog.get_logger(__name__)


class ClientFactory:
    """Factory for creating Business Central clients"""

    @staticmethod
    def create(
        settings: Settings,
        auth_provider: IAuthProvider,
        http_client: Optional[httpx.Client] = None,
    ) -> BCClient:
        """
        Create a client and apply the configured session scope.

        Authentication, environment and company are applied in that order,
        each only when configured, so a server can start with a partial
        scope and complete it through tools.

        Args:
            settings: Application settings
            auth_provider: Configured auth provider
            http_client: Transport override (tests)

        Returns:
            Configured client instance
        """
        logger.info("Creating Business Central client", api_root=settings.bc_api_root)

        client = BCClient(
            auth_provider,
            api_root=settings.bc_api_root,
            timeout=settings.request_timeout,
            http_client=http_client,
        )

        if settings.debug:
            client.set_verbosity(Verbosity.DEBUG)

        if settings.has_credentials:
            client.authenticate(
                settings.azure_tenant_id,
                settings.azure_client_id,
                settings.azure_client_secret,
            )

        if settings.bc_environment:
            client.set_environment(settings.bc_environment)

            if settings.has_company and client.context.is_authenticated:
                client.set_company(
                    company_id=settings.bc_company_id,
                    company_name=settings.bc_company_name,
                )

        logger.info("Business Central client ready", **client.context.describe())
        return client
