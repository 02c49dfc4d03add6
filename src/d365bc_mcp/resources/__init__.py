"""
Resource operations for the Business Central API

Thin operations over the client's dispatch: companies, customers, contacts,
items, sales documents, pictures, subscriptions, OData pages and custom APIs.
"""

from .models import (
    BCFields,
    ContactFields,
    CustomerFields,
    ItemFields,
    SalesLineFields,
    SalesOrderFields,
    SalesQuoteFields,
    SubscriptionFields,
)
from .operations import (
    ODataPageOperations,
    PictureOperations,
    ResourceOperations,
    ResourceSpec,
    ThirdPartyApiOperations,
    build_query_string,
)
from .catalog import BusinessCentral

__all__ = [
    "BCFields",
    "ContactFields",
    "CustomerFields",
    "ItemFields",
    "SalesLineFields",
    "SalesOrderFields",
    "SalesQuoteFields",
    "SubscriptionFields",
    "ODataPageOperations",
    "PictureOperations",
    "ResourceOperations",
    "ResourceSpec",
    "ThirdPartyApiOperations",
    "build_query_string",
    "BusinessCentral",
]
