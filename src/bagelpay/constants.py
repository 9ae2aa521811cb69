"""
Shared constants and configuration for the BagelPay SDK.

This module defines the SDK version, API endpoints and the
string enums used by request models and webhooks.
"""

from enum import Enum

VERSION = "1.0.3"

# =============================================================================
# API ENDPOINTS
# =============================================================================

DEFAULT_TEST_BASE_URL = "https://test.bagelpay.io"
DEFAULT_LIVE_BASE_URL = "https://live.bagelpay.io"

DEFAULT_TIMEOUT = 30  # seconds

USER_AGENT = f"BagelPay-Python-SDK/{VERSION}"

API_KEY_HEADER = "x-api-key"


class Endpoints:
    """Paths on the BagelPay API."""
    CHECKOUTS = "/api/payments/checkouts"

    PRODUCT_CREATE = "/api/products/create"
    PRODUCT_UPDATE = "/api/products/update"
    PRODUCT_LIST = "/api/products/list"
    PRODUCT = "/api/products/{id}"
    PRODUCT_ARCHIVE = "/api/products/{id}/archive"
    PRODUCT_UNARCHIVE = "/api/products/{id}/unarchive"

    TRANSACTION_LIST = "/api/transactions/list"

    SUBSCRIPTION_LIST = "/api/subscriptions/list"
    SUBSCRIPTION = "/api/subscriptions/{id}"
    SUBSCRIPTION_CANCEL = "/api/subscriptions/{id}/cancel"

    CUSTOMER_LIST = "/api/customers/list"


# =============================================================================
# PRODUCT BILLING
# =============================================================================

class BillingType(str, Enum):
    """How a product is paid for."""
    SINGLE_PAYMENT = "single_payment"
    SUBSCRIPTION = "subscription"


class RecurringInterval(str, Enum):
    """Billing cadence of a subscription product."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"


# =============================================================================
# EVENT TYPES (for webhooks)
# =============================================================================

class WebhookEventType(str, Enum):
    """Event types BagelPay sends to webhook endpoints."""
    # Checkout events
    CHECKOUT_COMPLETED = "checkout.completed"
    CHECKOUT_FAILED = "checkout.failed"
    CHECKOUT_CANCEL = "checkout.cancel"

    # Subscription events
    SUBSCRIPTION_TRIALING = "subscription.trialing"
    SUBSCRIPTION_PAID = "subscription.paid"
    SUBSCRIPTION_CANCELED = "subscription.canceled"

    # Refund events
    REFUND_CREATED = "refund.created"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in cls._value2member_map_


# Inbound webhook headers
WEBHOOK_TIMESTAMP_HEADER = "timestamp"
WEBHOOK_SIGNATURE_HEADER = "bagelpay-signature"


# =============================================================================
# CONFIGURATION
# =============================================================================

class Config:
    """Configuration constants."""

    # Environment variables read by ClientConfig.from_env()
    ENV_API_KEY = "BAGELPAY_API_KEY"
    ENV_TEST_MODE = "BAGELPAY_TEST_MODE"
    ENV_BASE_URL = "BAGELPAY_BASE_URL"
    ENV_TIMEOUT = "BAGELPAY_TIMEOUT"

    # HTTP methods that carry a JSON body
    BODY_METHODS = ("POST", "PUT", "PATCH")

    # Pagination query parameters
    PAGE_NUM_PARAM = "pageNum"
    PAGE_SIZE_PARAM = "pageSize"
