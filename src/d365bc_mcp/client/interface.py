"""
Business Central Client Interface

Defines contract for Business Central clients
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Union

from .context import ScopeContext, Verbosity
from .request import RequestDescriptor


class IBCClient(ABC):
    """Interface for Business Central clients"""

    context: ScopeContext

    @abstractmethod
    def authenticate(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """
        Obtain a bearer token and store it in the session scope.

        Returns:
            The bearer token
        """
        pass

    @abstractmethod
    def set_environment(self, name: str) -> None:
        """Select the environment (e.g. 'Production', 'Sandbox')"""
        pass

    @abstractmethod
    def set_company(
        self, company_id: Optional[str] = None, company_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Select the active company by id or by name.

        Returns:
            The company record the scope now points at
        """
        pass

    @abstractmethod
    def set_verbosity(self, verbosity: Union[Verbosity, str, bool]) -> None:
        """Toggle debug diagnostics for dispatched requests"""
        pass

    @abstractmethod
    def list_companies(self) -> List[Dict[str, Any]]:
        """List the companies of the selected environment"""
        pass

    @abstractmethod
    def dispatch(self, descriptor: RequestDescriptor) -> Any:
        """
        Validate, route and execute one request.

        Returns:
            Parsed JSON body, raw bytes for binary content, or None when the
            response has no content

        Raises:
            PreconditionError: If the session scope is incomplete
            BCApiError: If Business Central answers with a non-success status
        """
        pass

    @abstractmethod
    def get_client_info(self) -> Dict[str, Any]:
        """
        Get client implementation information.

        Returns:
            Client metadata (type, scope, capabilities, etc.)
        """
        pass
