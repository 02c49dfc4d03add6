"""
Field models for Business Central resources

Every field is optional. A field counts as provided only when it was passed
explicitly (pydantic tracks this in ``model_fields_set``), so an omitted
field never reaches the payload while ``display_name=""`` does.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BCFields(BaseModel):
    """Base for resource field sets, serialized under camelCase API names"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class CustomerFields(BCFields):
    number: Optional[str] = None
    display_name: Optional[str] = None
    type: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    salesperson_code: Optional[str] = None
    credit_limit: Optional[Decimal] = None
    tax_liable: Optional[bool] = None
    tax_area_id: Optional[str] = None
    tax_registration_number: Optional[str] = None
    currency_code: Optional[str] = None
    payment_terms_id: Optional[str] = None
    shipment_method_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    blocked: Optional[str] = None


class ContactFields(BCFields):
    number: Optional[str] = None
    type: Optional[str] = None
    display_name: Optional[str] = None
    company_number: Optional[str] = None
    company_name: Optional[str] = None
    business_relation: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    mobile_phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    search_name: Optional[str] = None
    privacy_blocked: Optional[bool] = None
    tax_registration_number: Optional[str] = None


class ItemFields(BCFields):
    number: Optional[str] = None
    display_name: Optional[str] = None
    display_name2: Optional[str] = None
    type: Optional[str] = None
    item_category_code: Optional[str] = None
    blocked: Optional[bool] = None
    gtin: Optional[str] = None
    unit_price: Optional[Decimal] = None
    price_includes_tax: Optional[bool] = None
    unit_cost: Optional[Decimal] = None
    tax_group_code: Optional[str] = None
    base_unit_of_measure_code: Optional[str] = None
    general_product_posting_group_code: Optional[str] = None
    inventory_posting_group_code: Optional[str] = None


class SalesQuoteFields(BCFields):
    external_document_number: Optional[str] = None
    document_date: Optional[date] = None
    due_date: Optional[date] = None
    valid_until_date: Optional[date] = None
    customer_id: Optional[str] = None
    customer_number: Optional[str] = None
    contact: Optional[str] = None
    bill_to_customer_number: Optional[str] = None
    ship_to_name: Optional[str] = None
    ship_to_contact: Optional[str] = None
    currency_code: Optional[str] = None
    payment_terms_id: Optional[str] = None
    shipment_method_id: Optional[str] = None
    salesperson: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class SalesOrderFields(BCFields):
    external_document_number: Optional[str] = None
    order_date: Optional[date] = None
    posting_date: Optional[date] = None
    requested_delivery_date: Optional[date] = None
    customer_id: Optional[str] = None
    customer_number: Optional[str] = None
    bill_to_customer_number: Optional[str] = None
    ship_to_name: Optional[str] = None
    ship_to_contact: Optional[str] = None
    currency_code: Optional[str] = None
    prices_include_tax: Optional[bool] = None
    payment_terms_id: Optional[str] = None
    shipment_method_id: Optional[str] = None
    salesperson: Optional[str] = None
    partial_shipping: Optional[bool] = None
    discount_amount: Optional[Decimal] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class SalesLineFields(BCFields):
    sequence: Optional[int] = None
    item_id: Optional[str] = None
    line_type: Optional[str] = None
    line_object_number: Optional[str] = None
    description: Optional[str] = None
    unit_of_measure_code: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    discount_percent: Optional[Decimal] = None
    tax_code: Optional[str] = None
    shipment_date: Optional[date] = None


class SubscriptionFields(BCFields):
    notification_url: Optional[str] = None
    resource: Optional[str] = None
    client_state: Optional[str] = None
