"""
D365BC MCP Server

Client library and Model Context Protocol server for the Microsoft Dynamics 365
Business Central REST API: authenticate once, pin an environment and company,
then work with customers, contacts, items, sales documents, pictures and
webhook subscriptions.
"""

__version__ = "0.1.0"

from .client import BCClient, ScopeContext, Verbosity, AddressingMode, HttpMethod, RequestDescriptor
from .resources import BusinessCentral

__all__ = [
    "BCClient",
    "ScopeContext",
    "Verbosity",
    "AddressingMode",
    "HttpMethod",
    "RequestDescriptor",
    "BusinessCentral",
]
