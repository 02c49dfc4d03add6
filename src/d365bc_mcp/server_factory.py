"""
Server Factory for the Business Central MCP Server

Creates fully configured server instances from settings.
"""

import structlog
from fastmcp import FastMCP

from . import __version__
from .client import BCClient
from .config import get_settings
from .factories import AuthProviderFactory, ClientFactory
from .tools.registry import ToolRegistry

logger = structlog.get_logger(__name__)


class ServerFactory:
    """
    Factory for creating fully configured Business Central MCP server instances.
    """

    @staticmethod
    def create_client() -> BCClient:
        """
        Create the client session the server works on.

        The caller owns the client and closes it when the server stops.
        """
        settings = get_settings()
        logger.info("Configuration loaded",
                   auth_provider=settings.auth_provider,
                   environment=settings.bc_environment,
                   company=settings.bc_company_name or settings.bc_company_id)

        auth_provider = AuthProviderFactory.create(settings)
        return ClientFactory.create(settings, auth_provider)

    @staticmethod
    def create_configured_server(client: BCClient) -> FastMCP:
        """
        Create a ready-to-run MCP server bound to one client session.

        Args:
            client: Client session from create_client()

        Returns:
            FastMCP server with tools registered
        """
        logger.info("Creating Business Central MCP Server")

        try:
            mcp = FastMCP(name="D365BC-MCP-Server", version=__version__)
            ToolRegistry.register_all_tools(mcp, client)

            logger.info("Business Central MCP Server created successfully")
            return mcp

        except Exception as e:
            logger.error("Failed to create MCP server", error=str(e))
            raise


class ServerValidator:
    """
    Utility class for configuration checks.
    """

    @staticmethod
    def validate_configuration() -> bool:
        """Validate configuration and Business Central connectivity"""
        print("🔧 Validating Business Central MCP Configuration...")

        try:
            settings = get_settings()
            print("✅ Configuration loaded")
            print(f"   - API root: {settings.bc_api_root}")
            print(f"   - Environment: {settings.bc_environment or '(not set)'}")
            print(f"   - Company: {settings.bc_company_name or settings.bc_company_id or '(not set)'}")
            print(f"   - Auth Provider: {settings.auth_provider}")

            if not settings.has_credentials:
                print("❌ AZURE_TENANT_ID, AZURE_CLIENT_ID and AZURE_CLIENT_SECRET are required for validation")
                return False

            auth_provider = AuthProviderFactory.create(settings)
            try:
                client = ClientFactory.create(settings, auth_provider)
            except Exception as e:
                print(f"❌ Client setup failed: {e}")
                return False

            with client:
                print("✅ Authentication successful")

                if not settings.bc_environment:
                    print("⚠️  BC_ENVIRONMENT not set, skipping company checks")
                    return True

                try:
                    companies = client.list_companies()
                except Exception as e:
                    print(f"❌ Listing companies failed: {e}")
                    return False

                print(f"✅ Environment reachable ({len(companies)} companies)")
                for company in companies:
                    print(f"   - {company.get('name')} ({company.get('id')})")

                if client.context.has_company:
                    print(f"✅ Active company: {client.context.company_name}")

            print("\n🎉 Configuration validation completed successfully!")
            return True

        except Exception as e:
            print(f"❌ Configuration validation failed: {e}")
            return False
