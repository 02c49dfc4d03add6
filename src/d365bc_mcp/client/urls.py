"""
Base URL construction for the Business Central addressing schemes

Business Central splits its API surface per audience, so each request names
its addressing mode explicitly:

- DEFAULT: standard v2.0 API scoped to the active company
- NO_COMPANY_CONTEXT: environment-level v2.0 API (companies, subscriptions)
- ODATA_ENDPOINT: legacy OData V4 web services, company addressed by name
- THIRD_PARTY_API: partner/custom APIs routed by publisher, group and version
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote

from ..errors import (
    ConfigurationError,
    EnvironmentContextRequiredError,
    CompanyContextRequiredError,
)
from .context import ScopeContext

DEFAULT_API_ROOT = "https://api.businesscentral.dynamics.com/v2.0"

# Characters of a company name kept as-is inside Company('...')
_LITERAL_SAFE = " '(),.&!*+=;:@$"


class AddressingMode(str, Enum):
    DEFAULT = "default"
    NO_COMPANY_CONTEXT = "no_company_context"
    ODATA_ENDPOINT = "odata_endpoint"
    THIRD_PARTY_API = "third_party_api"

    @property
    def requires_company(self) -> bool:
        return self is not AddressingMode.NO_COMPANY_CONTEXT


@dataclass(frozen=True)
class ThirdPartyApiRoute:
    """Route of a custom API: /api/{publisher}/{group}/{version}"""

    publisher: Optional[str] = None
    group: Optional[str] = None
    version: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.publisher) and bool(self.group) and bool(self.version)

    def missing(self) -> list[str]:
        return [
            name
            for name, value in (
                ("api_publisher", self.publisher),
                ("api_group", self.group),
                ("api_version", self.version),
            )
            if not value
        ]


def _require_environment(context: ScopeContext) -> str:
    if not context.environment_name:
        raise EnvironmentContextRequiredError()
    return context.environment_name


def _require_tenant(context: ScopeContext, mode: AddressingMode) -> str:
    if not context.token_tenant_id:
        raise ConfigurationError(
            f"Addressing mode '{mode.value}' needs the tenant id of the token. "
            "Call authenticate() first."
        )
    return context.token_tenant_id


def _require_company_id(context: ScopeContext) -> str:
    if not context.company_id:
        raise CompanyContextRequiredError()
    return context.company_id


def _odata_string_literal(value: str) -> str:
    """Quote a value as an OData string literal for use in a URL path"""
    # quotes are doubled, URL delimiters (#, ?, /, %) are percent-encoded
    escaped = quote(value.replace("'", "''"), safe=_LITERAL_SAFE)
    return f"'{escaped}'"


def build_base_url(
    mode: AddressingMode,
    context: ScopeContext,
    third_party: Optional[ThirdPartyApiRoute] = None,
    api_root: str = DEFAULT_API_ROOT,
) -> str:
    """
    Build the base URL for a request.

    Pure function of its arguments: the same mode and scope always give the
    same URL.

    Args:
        mode: Addressing mode of the request
        context: Session scope (environment, company, tenant)
        third_party: Publisher/group/version, required for THIRD_PARTY_API
        api_root: Service root, defaults to the public Business Central API

    Returns:
        Base URL without trailing slash

    Raises:
        ConfigurationError: If a value required by the mode is missing
    """
    root = api_root.rstrip("/")

    if mode is AddressingMode.DEFAULT:
        environment = _require_environment(context)
        company_id = _require_company_id(context)
        return f"{root}/{environment}/api/v2.0/companies({company_id})"

    if mode is AddressingMode.NO_COMPANY_CONTEXT:
        environment = _require_environment(context)
        return f"{root}/{environment}/api/v2.0"

    if mode is AddressingMode.ODATA_ENDPOINT:
        tenant_id = _require_tenant(context, mode)
        environment = _require_environment(context)
        if not context.company_name:
            raise CompanyContextRequiredError()
        company = _odata_string_literal(context.company_name)
        return f"{root}/{tenant_id}/{environment}/ODataV4/Company({company})"

    if mode is AddressingMode.THIRD_PARTY_API:
        route = third_party or ThirdPartyApiRoute()
        if not route.is_complete:
            raise ConfigurationError(
                "Third-party API requests need api_publisher, api_group and api_version; "
                f"missing: {', '.join(route.missing())}"
            )
        tenant_id = _require_tenant(context, mode)
        environment = _require_environment(context)
        company_id = _require_company_id(context)
        return (
            f"{root}/{tenant_id}/{environment}/api/"
            f"{route.publisher}/{route.group}/{route.version}/Companies({company_id})"
        )

    raise ValueError(f"Unknown addressing mode: {mode}")


def build_url(
    base_url: str, endpoint_path: str, query_string: Optional[str] = None
) -> str:
    """Join base URL, endpoint path and optional query string"""
    return f"{base_url}{endpoint_path}{query_string or ''}"
