"""
Business Central resource catalog

Binds the generic operations to the resource collections exposed by the
standard v2.0 API.
"""

from ..client import AddressingMode, IBCClient
from .models import (
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
)

COMPANIES = ResourceSpec("companies", mode=AddressingMode.NO_COMPANY_CONTEXT, read_only=True)
CUSTOMERS = ResourceSpec("customers", CustomerFields)
CONTACTS = ResourceSpec("contacts", ContactFields)
ITEMS = ResourceSpec("items", ItemFields)
SALES_QUOTES = ResourceSpec("salesQuotes", SalesQuoteFields)
SALES_QUOTE_LINES = ResourceSpec("salesQuoteLines", SalesLineFields, parent="salesQuotes")
SALES_ORDERS = ResourceSpec("salesOrders", SalesOrderFields)
SALES_ORDER_LINES = ResourceSpec("salesOrderLines", SalesLineFields, parent="salesOrders")
SUBSCRIPTIONS = ResourceSpec(
    "subscriptions",
    SubscriptionFields,
    mode=AddressingMode.NO_COMPANY_CONTEXT,
    quote_key=True,
)


class BusinessCentral:
    """Resource operations of one client session"""

    def __init__(self, client: IBCClient) -> None:
        self.client = client

        self.companies = ResourceOperations(client, COMPANIES)
        self.customers = ResourceOperations(client, CUSTOMERS)
        self.contacts = ResourceOperations(client, CONTACTS)
        self.items = ResourceOperations(client, ITEMS)
        self.sales_quotes = ResourceOperations(client, SALES_QUOTES)
        self.sales_quote_lines = ResourceOperations(client, SALES_QUOTE_LINES)
        self.sales_orders = ResourceOperations(client, SALES_ORDERS)
        self.sales_order_lines = ResourceOperations(client, SALES_ORDER_LINES)
        self.subscriptions = ResourceOperations(client, SUBSCRIPTIONS)

        self.item_pictures = PictureOperations(client, "items")
        self.customer_pictures = PictureOperations(client, "customers")
        self.contact_pictures = PictureOperations(client, "contacts")

        self.odata = ODataPageOperations(client)
        self.custom_apis = ThirdPartyApiOperations(client)
