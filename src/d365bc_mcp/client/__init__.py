"""
Business Central Client module

Request dispatch for the Business Central REST API: session scope, URL
construction, partial payloads and verb-specific headers.
"""

from .context import ScopeContext, Verbosity
from .urls import AddressingMode, ThirdPartyApiRoute, DEFAULT_API_ROOT, build_base_url, build_url
from .payload import build_payload
from .request import HttpMethod, RequestDescriptor
from .interface import IBCClient
from .bc_client import BCClient

__all__ = [
    "ScopeContext",
    "Verbosity",
    "AddressingMode",
    "ThirdPartyApiRoute",
    "DEFAULT_API_ROOT",
    "build_base_url",
    "build_url",
    "build_payload",
    "HttpMethod",
    "RequestDescriptor",
    "IBCClient",
    "BCClient",
]
