"""
Session scope for Business Central requests

Holds the bearer token and the tenant → environment → company scope that
every dispatched request is routed under. One instance per session.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Verbosity(str, Enum):
    NORMAL = "normal"
    DEBUG = "debug"


@dataclass
class ScopeContext:
    """Mutable scope of a single client session"""

    token: Optional[str] = None
    token_tenant_id: Optional[str] = None
    environment_name: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    verbosity: Verbosity = Verbosity.NORMAL

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def has_company(self) -> bool:
        return bool(self.company_id) and bool(self.company_name)

    def set_token(self, token: str, tenant_id: str) -> None:
        self.token = token
        self.token_tenant_id = tenant_id

    def set_company(self, company_id: str, company_name: str) -> None:
        # id and name always move together
        self.company_id = company_id
        self.company_name = company_name

    def clear_company(self) -> None:
        self.company_id = None
        self.company_name = None

    def snapshot(self) -> "ScopeContext":
        """Copy of the current scope, safe to hand to pure URL builders"""
        return replace(self)

    def describe(self) -> dict:
        """Scope summary without the token"""
        return {
            "authenticated": self.is_authenticated,
            "tenant_id": self.token_tenant_id,
            "environment": self.environment_name,
            "company_id": self.company_id,
            "company_name": self.company_name,
            "verbosity": self.verbosity.value,
        }
