"""
Data models for the BagelPay API.

Every model is an immutable record exchanged with the API. Response
fields default to None, which means "not sent by the API" and is kept
distinct from empty strings, zero and False.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type


@dataclass(frozen=True)
class Model:
    """Base class with JSON helpers shared by all models."""

    # Field name -> model class for embedded records
    _nested: ClassVar[Dict[str, Type["Model"]]] = {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for a request body. Fields set to None are left out."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Model):
                value = value.to_dict()
            elif isinstance(value, list):
                value = [v.to_dict() if isinstance(v, Model) else v for v in value]
            data[f.name] = value
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build a model from a decoded JSON object, ignoring unknown keys."""
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            nested = cls._nested.get(f.name)
            if nested is not None and value is not None:
                value = nested.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str):
        return cls.from_dict(json.loads(text))


# =============================================================================
# Customers
# =============================================================================

@dataclass(frozen=True)
class Customer(Model):
    """Customer attached to a checkout session."""
    email: str


@dataclass(frozen=True)
class CustomerReference(Model):
    """Customer embedded in a subscription or transaction."""
    id: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class CustomerData(Model):
    """A customer of the store, with spend counters."""
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    remark: Optional[str] = None
    subscriptions: Optional[int] = None   # Number of subscriptions
    payments: Optional[int] = None        # Number of payments
    store_id: Optional[str] = None
    total_spend: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# =============================================================================
# Checkout
# =============================================================================

@dataclass(frozen=True)
class CheckoutRequest(Model):
    """
    Request to create a checkout session.

    Usage:
        request = CheckoutRequest(
            product_id="prod_123",
            customer=Customer(email="payer@example.com"),
            request_id="order-42",
            success_url="https://example.com/thanks",
            metadata={"order_id": 42},
        )
    """
    product_id: str
    customer: Optional[Customer] = None
    request_id: Optional[str] = None      # Idempotency key
    units: Optional[str] = None
    success_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    _nested: ClassVar[Dict[str, Type[Model]]] = {"customer": Customer}


@dataclass(frozen=True)
class CheckoutResponse(Model):
    """A checkout session. Redirect the payer to checkout_url."""
    object: Optional[str] = None
    units: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    mode: Optional[str] = None
    payment_id: Optional[str] = None
    product_id: Optional[str] = None
    request_id: Optional[str] = None
    success_url: Optional[str] = None
    checkout_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    expires_on: Optional[str] = None


# =============================================================================
# Products
# =============================================================================

@dataclass(frozen=True)
class CreateProductRequest(Model):
    """
    Request to create a product.

    recurring_interval and trial_days only apply when billing_type
    is "subscription".
    """
    name: str
    price: float
    currency: str
    billing_type: str
    description: Optional[str] = None
    tax_inclusive: Optional[bool] = None
    tax_category: Optional[str] = None
    recurring_interval: Optional[str] = None
    trial_days: Optional[int] = None


@dataclass(frozen=True)
class UpdateProductRequest(Model):
    """
    Request to update a product. Only the fields that are set are sent.

    The update endpoint behaves like a PUT, so the server may treat the
    request as a full replacement and reset fields left unset here.
    Send every field you want to keep.
    """
    product_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    billing_type: Optional[str] = None
    tax_inclusive: Optional[bool] = None
    tax_category: Optional[str] = None
    recurring_interval: Optional[str] = None
    trial_days: Optional[int] = None


@dataclass(frozen=True)
class Product(Model):
    """A product in the store catalog."""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    object: Optional[str] = None
    mode: Optional[str] = None
    product_id: Optional[str] = None
    store_id: Optional[str] = None
    product_url: Optional[str] = None
    billing_type: Optional[str] = None
    billing_period: Optional[str] = None
    tax_category: Optional[str] = None
    tax_inclusive: Optional[bool] = None
    is_archive: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    trial_days: Optional[int] = None
    recurring_interval: Optional[str] = None

    @property
    def is_subscription(self) -> bool:
        return self.billing_type == "subscription"


# =============================================================================
# Subscriptions
# =============================================================================

@dataclass(frozen=True)
class Subscription(Model):
    """
    A customer's subscription to a product.

    status is owned by the API (e.g. "trialing", "active", "canceled").
    """
    object: Optional[str] = None
    status: Optional[str] = None
    remark: Optional[str] = None
    customer: Optional[CustomerReference] = None
    mode: Optional[str] = None
    amount: Optional[float] = None
    last4: Optional[str] = None
    subscription_id: Optional[str] = None
    product_id: Optional[str] = None
    store_id: Optional[str] = None
    billing_period_start: Optional[str] = None
    billing_period_end: Optional[str] = None
    cancel_at: Optional[str] = None
    trial_start: Optional[str] = None
    trial_end: Optional[str] = None
    units: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    product_name: Optional[str] = None
    payment_method: Optional[str] = None
    next_billing_amount: Optional[float] = None
    recurring_interval: Optional[str] = None

    _nested: ClassVar[Dict[str, Type[Model]]] = {"customer": CustomerReference}


# =============================================================================
# Transactions
# =============================================================================

@dataclass(frozen=True)
class Transaction(Model):
    """A payment or refund recorded against the store."""
    object: Optional[str] = None
    order_id: Optional[str] = None
    transaction_id: Optional[str] = None
    amount: Optional[float] = None
    amount_paid: Optional[float] = None
    discount_amount: Optional[float] = None
    currency: Optional[str] = None
    tax_amount: Optional[float] = None
    tax_country: Optional[str] = None
    refunded_amount: Optional[float] = None
    type: Optional[str] = None
    customer: Optional[CustomerReference] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    remark: Optional[str] = None
    mode: Optional[str] = None
    fees: Optional[float] = None
    tax: Optional[float] = None
    net: Optional[float] = None

    _nested: ClassVar[Dict[str, Type[Model]]] = {"customer": CustomerReference}


# =============================================================================
# List responses
# =============================================================================

@dataclass(frozen=True)
class ListResponse(Model):
    """
    One page of results from a list endpoint.

    total is the number of records across all pages, items holds
    only the requested page.
    """
    total: int = 0
    items: List[Any] = field(default_factory=list)
    code: Optional[int] = None
    msg: Optional[str] = None

    _item_type: ClassVar[Type[Model]] = Model

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
        items = data.get("items") or []
        return cls(
            total=data.get("total") or 0,
            items=[cls._item_type.from_dict(item) for item in items],
            code=data.get("code"),
            msg=data.get("msg"),
        )

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class ProductList(ListResponse):
    _item_type: ClassVar[Type[Model]] = Product


@dataclass(frozen=True)
class TransactionList(ListResponse):
    _item_type: ClassVar[Type[Model]] = Transaction


@dataclass(frozen=True)
class SubscriptionList(ListResponse):
    _item_type: ClassVar[Type[Model]] = Subscription


@dataclass(frozen=True)
class CustomerList(ListResponse):
    _item_type: ClassVar[Type[Model]] = CustomerData


# =============================================================================
# Errors
# =============================================================================

@dataclass(frozen=True)
class APIErrorPayload(Model):
    """Error body returned by the API for 4xx/5xx responses."""
    code: int = 0
    message: str = ""
    details: Optional[str] = None

    @classmethod
    def fallback(cls, status_code: int, body: str) -> "APIErrorPayload":
        """Payload used when the error body is not a usable JSON error."""
        return cls(code=status_code, message=f"HTTP {status_code}: {body}")
