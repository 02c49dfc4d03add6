"""
Configuration management for the Business Central MCP Server
"""

import os
from pathlib import Path
from typing import Optional, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth.bc_auth import DEFAULT_TOKEN_SCOPE
from .client.urls import DEFAULT_API_ROOT


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Azure AD app registration (optional: the session can authenticate later)
    azure_tenant_id: Optional[str] = None
    azure_client_id: Optional[str] = None
    azure_client_secret: Optional[str] = None

    # Initial session scope
    bc_environment: Optional[str] = None
    bc_company_id: Optional[str] = None
    bc_company_name: Optional[str] = None

    # Service endpoints
    bc_api_root: str = DEFAULT_API_ROOT
    bc_token_scope: str = DEFAULT_TOKEN_SCOPE
    request_timeout: float = 30.0

    log_level: str = "info"

    # Development Settings
    debug: bool = False

    # Implementation Selection
    auth_provider: Literal["azure_ad", "mock"] = "azure_ad"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def has_credentials(self) -> bool:
        """All three client-credential values are configured"""
        return bool(self.azure_tenant_id and self.azure_client_id and self.azure_client_secret)

    @property
    def has_company(self) -> bool:
        return bool(self.bc_company_id or self.bc_company_name)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings singleton"""
    global _settings
    if _settings is None:
        # Ensure .env is loaded before creating settings
        load_dotenv_if_exists()

        import structlog
        logger = structlog.get_logger(__name__)
        logger.info("Environment variables",
                   bc_environment=os.getenv('BC_ENVIRONMENT'),
                   auth_provider=os.getenv('AUTH_PROVIDER'),
                   cwd=os.getcwd())

        try:
            _settings = Settings()
            logger.info("Settings loaded",
                       bc_environment=_settings.bc_environment,
                       auth_provider=_settings.auth_provider)
        except Exception as e:
            # Re-raise with more context
            raise ValueError(f"Invalid configuration. Check your .env file: {e}") from e
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (tests, config reload)"""
    global _settings
    _settings = None


def load_dotenv_if_exists() -> None:
    """Load .env file if it exists"""
    from dotenv import load_dotenv

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)
    else:
        # Try to load from parent directories
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            env_path = parent / ".env"
            if env_path.exists():
                load_dotenv(env_path)
                break
