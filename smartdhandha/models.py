"""
Record models for the SmartDhandha backend collections.

The backend speaks camelCase JSON with Mongo style ``_id`` keys; the models
expose snake_case attributes and accept either spelling on input. Dates are
kept as the ISO strings the backend stores, since range filters compare them
lexicographically.
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Annotated, Literal, Optional
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_GST_RATE = 18.0
DEFAULT_LOW_STOCK = 5
CUSTOMER_TYPES = ("Retail", "Wholesale", "Corporate", "Online")


def _iso(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _or_default(default):
    def convert(value):
        return default if value is None or value == "" else value
    return convert


IsoDate = Annotated[str, BeforeValidator(_iso)]
RecordId = Optional[str]


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


def _id_field(required: bool = False):
    return Field(
        ... if required else None,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="id",
    )


class Customer(CamelModel):
    id: str = _id_field(required=True)
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    gstin: Optional[str] = None
    customer_type: Optional[str] = None  # one of CUSTOMER_TYPES
    created_at: Optional[IsoDate] = None


class LedgerTransaction(CamelModel):
    id: RecordId = _id_field()
    customer_id: str
    type: Literal["credit", "debit"]
    amount: float
    date: IsoDate
    note: Optional[str] = None


class Reminder(CamelModel):
    id: RecordId = _id_field()
    customer_id: str
    due_date: IsoDate
    message: Annotated[str, BeforeValidator(_or_default("Payment due"))] = "Payment due"
    is_completed: bool = False


class Product(CamelModel):
    id: str = _id_field(required=True)
    name: str
    category: Optional[str] = None
    sku: Optional[str] = None
    unit_price: float = Field(0.0, ge=0)
    gst_rate: Annotated[float, BeforeValidator(_or_default(DEFAULT_GST_RATE))] = DEFAULT_GST_RATE
    stock: int = Field(0, ge=0)
    low_stock: Annotated[int, BeforeValidator(_or_default(DEFAULT_LOW_STOCK))] = DEFAULT_LOW_STOCK
    image: Optional[str] = None


class InvoiceLineItem(CamelModel):
    product_id: str
    name: str = ""
    qty: float
    price: float
    gst_rate: float = DEFAULT_GST_RATE
    amount: float = 0.0
    gst_amount: float = 0.0
    line_total: float = 0.0


class Invoice(CamelModel):
    id: RecordId = _id_field()
    type: Literal["sale", "purchase"]
    date: IsoDate
    customer_name: str = ""
    items: list[InvoiceLineItem] = Field(default_factory=list)
    note: Optional[str] = None
    subtotal: float = 0.0
    total_gst: float = Field(0.0, alias="totalGST")
    total_grand: float = 0.0


class CashflowEntry(CamelModel):
    id: RecordId = _id_field()
    kind: Literal["income", "expense"]
    date: IsoDate
    category: str = ""
    amount: float
    note: Optional[str] = None
    invoice_id: Optional[str] = None


class Supplier(CamelModel):
    id: str = _id_field(required=True)
    name: str
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class Visitor(CamelModel):
    id: RecordId = _id_field()
    name: str
    company: Optional[str] = None
    purpose: Optional[str] = None
    status: Literal["Inside", "Exited"] = "Inside"
    check_in_time: Optional[IsoDate] = None
    check_out_time: Optional[IsoDate] = None
