"""
Business Central Authentication Manager

Azure AD implementation of IAuthProvider using the client credentials grant.
"""

from typing import Dict, Any, Optional
from azure.identity import ClientSecretCredential
import structlog

from .interface import IAuthProvider, AuthenticationError

logger = structlog.get_logger(__name__)

DEFAULT_TOKEN_SCOPE = "https://api.businesscentral.dynamics.com/.default"


class BCAuthManager(IAuthProvider):
    """Obtains Business Central tokens from Azure AD.

    Tokens are not cached or refreshed here: a token lives for about an hour
    and the session re-authenticates once Business Central starts rejecting it.
    """

    def __init__(self, scope: str = DEFAULT_TOKEN_SCOPE, authority: Optional[str] = None) -> None:
        self.scope = scope
        self.authority = authority
        self._last_tenant_id: Optional[str] = None
        self._last_client_id: Optional[str] = None

    def authenticate(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """
        Get a Business Central access token using client credentials flow

        Args:
            tenant_id: Azure AD tenant id
            client_id: App registration client id
            client_secret: App registration client secret

        Returns:
            Bearer token string
        """
        if not tenant_id or not client_id or not client_secret:
            raise AuthenticationError("tenant_id, client_id and client_secret are all required")

        credential_kwargs: Dict[str, Any] = {}
        if self.authority:
            credential_kwargs["authority"] = self.authority

        try:
            credential = ClientSecretCredential(
                tenant_id=tenant_id,
                client_id=client_id,
                client_secret=client_secret,
                **credential_kwargs,
            )

            logger.debug("Requesting Business Central token", scope=self.scope, tenant_id=tenant_id)
            token = credential.get_token(self.scope)

            self._last_tenant_id = tenant_id
            self._last_client_id = client_id
            logger.info(
                "Business Central token acquired", tenant_id=tenant_id, expires_on=token.expires_on
            )

            return str(token.token)

        except Exception as e:
            logger.error(
                "Failed to acquire Business Central token",
                error=str(e),
                tenant_id=tenant_id,
                client_id=client_id,
            )
            raise AuthenticationError(f"Failed to acquire Business Central token: {e}") from e

    def get_provider_info(self) -> Dict[str, Any]:
        """Get provider information (IAuthProvider interface method)"""
        return {
            "type": "azure_ad",
            "scope": self.scope,
            "authority": self.authority,
            "tenant_id": self._last_tenant_id,
            "client_id": self._last_client_id,
        }
