"""
Business Central REST Client

Dispatches requests against the Business Central API under an explicit
session scope (token, environment, company).
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import httpx
import structlog
from pydantic import BaseModel

from ..auth import IAuthProvider
from ..errors import (
    AuthenticationRequiredError,
    BCApiError,
    CompanyContextRequiredError,
    CompanyNotFoundError,
    ConfigurationError,
    EnvironmentContextRequiredError,
)
from .context import ScopeContext, Verbosity
from .interface import IBCClient
from .payload import build_payload
from .request import HttpMethod, RequestDescriptor
from .urls import AddressingMode, DEFAULT_API_ROOT, build_base_url, build_url

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class BCClient(IBCClient):
    """HTTP client for the Business Central REST API bound to one session scope"""

    def __init__(
        self,
        auth_provider: IAuthProvider,
        context: Optional[ScopeContext] = None,
        api_root: str = DEFAULT_API_ROOT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.auth_provider = auth_provider
        self.context = context or ScopeContext()
        self.api_root = api_root
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BCClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Session scope

    def authenticate(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """Obtain a token from the auth provider and pin it with its tenant"""
        token = self.auth_provider.authenticate(tenant_id, client_id, client_secret)
        self.context.set_token(token, tenant_id)
        logger.info("Session authenticated", tenant_id=tenant_id)
        return token

    def set_environment(self, name: str) -> None:
        if not name:
            raise ValueError("Environment name must not be empty")

        if self.context.environment_name != name and self.context.has_company:
            # company ids are environment specific
            logger.info(
                "Clearing company context for new environment",
                previous_environment=self.context.environment_name,
                company_name=self.context.company_name,
            )
            self.context.clear_company()

        self.context.environment_name = name
        logger.info("Environment set", environment=name)

    def list_companies(self) -> List[Dict[str, Any]]:
        result = self.dispatch(
            RequestDescriptor("/companies", mode=AddressingMode.NO_COMPANY_CONTEXT)
        )
        return list((result or {}).get("value", []))

    def set_company(
        self, company_id: Optional[str] = None, company_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Select the active company.

        The missing half of (id, name) is resolved from the environment's
        company list, so selecting by id or by name yields the same scope.

        Args:
            company_id: Company GUID
            company_name: Company name as shown in Business Central

        Returns:
            The matching company record

        Raises:
            CompanyNotFoundError: If no company matches
        """
        if not company_id and not company_name:
            raise ValueError("Either company_id or company_name is required")

        companies = self.list_companies()
        company = _match_company(companies, company_id, company_name)
        if company is None:
            raise CompanyNotFoundError(
                f"No company matching id={company_id!r} name={company_name!r} "
                f"in environment '{self.context.environment_name}'"
            )

        self.context.set_company(company["id"], company["name"])
        logger.info(
            "Company set",
            environment=self.context.environment_name,
            company_id=company["id"],
            company_name=company["name"],
        )
        return company

    def set_verbosity(self, verbosity: Union[Verbosity, str, bool]) -> None:
        if isinstance(verbosity, bool):
            verbosity = Verbosity.DEBUG if verbosity else Verbosity.NORMAL
        self.context.verbosity = Verbosity(verbosity)
        logger.info("Verbosity set", verbosity=self.context.verbosity.value)

    # Dispatch

    def check_preconditions(self, descriptor: RequestDescriptor) -> None:
        """Fail fast, before any network call, when the scope is incomplete"""
        if not self.context.token:
            raise AuthenticationRequiredError()

        if descriptor.mode.requires_company:
            if not self.context.environment_name:
                raise EnvironmentContextRequiredError()
            if not self.context.has_company:
                raise CompanyContextRequiredError()

        if descriptor.mode is AddressingMode.THIRD_PARTY_API:
            route = descriptor.third_party_route
            if not route.is_complete:
                raise ConfigurationError(
                    "Third-party API requests need api_publisher, api_group and api_version; "
                    f"missing: {', '.join(route.missing())}"
                )

    def get_headers(self, method: HttpMethod) -> Dict[str, str]:
        """Get HTTP headers for a Business Central request"""
        headers = {
            "Authorization": f"Bearer {self.context.token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if method.requires_if_match:
            # wildcard match, no per-entity etag tracking
            headers["If-Match"] = "*"
        return headers

    def build_request_url(self, descriptor: RequestDescriptor) -> str:
        base_url = build_base_url(
            descriptor.mode,
            self.context.snapshot(),
            descriptor.third_party_route,
            self.api_root,
        )
        return build_url(base_url, descriptor.endpoint_path, descriptor.query_string)

    def dispatch(self, descriptor: RequestDescriptor) -> Any:
        """
        Execute one request against Business Central.

        Args:
            descriptor: Endpoint path, method, addressing mode and body/file

        Returns:
            Parsed JSON body for every verb and mode, raw bytes for binary
            responses, None when the response has no content

        Raises:
            PreconditionError: If token, environment, company or third-party
                route parameters are missing
            BCApiError: If the response status is not a success
            httpx.TransportError: On network failures (not retried)
        """
        self.check_preconditions(descriptor)

        url = self.build_request_url(descriptor)
        headers = self.get_headers(descriptor.method)
        verb = descriptor.method.http_verb

        body = descriptor.body
        if isinstance(body, BaseModel):
            body = build_payload(body)

        if self.context.verbosity is Verbosity.DEBUG:
            logger.info(
                "Dispatching request",
                environment=self.context.environment_name,
                request=f"{verb} {url}",
                body=body if descriptor.file_path is None else f"<file {descriptor.file_path}>",
            )

        request_kwargs: Dict[str, Any] = {"headers": headers}
        if descriptor.method is HttpMethod.UPLOAD:
            request_kwargs["content"] = Path(descriptor.file_path).read_bytes()
        elif body is not None:
            request_kwargs["json"] = body

        try:
            response = self._http.request(verb, url, **request_kwargs)
        except httpx.TransportError as e:
            logger.error("Request error", method=verb, url=url, error=str(e))
            raise

        if not response.is_success:
            logger.error(
                "Business Central request failed",
                method=verb,
                url=url,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise BCApiError(response.status_code, response.text, method=verb, url=url)

        return _parse_response(response)

    def get_client_info(self) -> Dict[str, Any]:
        """
        Get client implementation information.

        Returns:
            Client metadata (type, scope, capabilities, etc.)
        """
        return {
            "type": "business_central_rest",
            "api_root": self.api_root,
            "scope": self.context.describe(),
            "auth_provider": self.auth_provider.get_provider_info().get("type"),
            "addressing_modes": [mode.value for mode in AddressingMode],
            "capabilities": [method.value.lower() for method in HttpMethod],
        }


def _parse_response(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    return response.content


def _match_company(
    companies: List[Dict[str, Any]],
    company_id: Optional[str],
    company_name: Optional[str],
) -> Optional[Dict[str, Any]]:
    for company in companies:
        id_matches = (
            company_id is None
            or str(company.get("id", "")).lower() == company_id.lower()
        )
        name_matches = company_name is None or company_name in (
            company.get("name"),
            company.get("displayName"),
        )
        if id_matches and name_matches:
            return company
    return None
