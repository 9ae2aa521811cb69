"""BagelPay Python SDK."""

from .constants import (
    VERSION,
    DEFAULT_TEST_BASE_URL,
    DEFAULT_LIVE_BASE_URL,
    DEFAULT_TIMEOUT,
    BillingType,
    RecurringInterval,
    WebhookEventType,
)

from .config import ClientConfig

from .errors import (
    BagelPayError,
    BagelPayAPIError,
    BagelPayAuthenticationError,
    BagelPayValidationError,
    BagelPayNotFoundError,
    BagelPayRateLimitError,
    BagelPayServerError,
    error_for_status,
    is_authentication_error,
    is_validation_error,
    is_not_found_error,
    is_rate_limit_error,
    is_server_error,
    is_api_error,
)

from .models import (
    APIErrorPayload,
    CheckoutRequest,
    CheckoutResponse,
    CreateProductRequest,
    Customer,
    CustomerData,
    CustomerList,
    CustomerReference,
    Product,
    ProductList,
    Subscription,
    SubscriptionList,
    Transaction,
    TransactionList,
    UpdateProductRequest,
)

from .client import (
    BagelPayClient,
    create_test_client,
    create_live_client,
)

from .webhooks import (
    WebhookHandler,
    WebhookEvent,
    WebhookVerificationError,
    compute_webhook_signature,
    verify_webhook_signature,
)

__version__ = VERSION

__all__ = [
    # Constants
    "VERSION",
    "DEFAULT_TEST_BASE_URL",
    "DEFAULT_LIVE_BASE_URL",
    "DEFAULT_TIMEOUT",
    "BillingType",
    "RecurringInterval",
    "WebhookEventType",
    # Config
    "ClientConfig",
    # Errors
    "BagelPayError",
    "BagelPayAPIError",
    "BagelPayAuthenticationError",
    "BagelPayValidationError",
    "BagelPayNotFoundError",
    "BagelPayRateLimitError",
    "BagelPayServerError",
    "error_for_status",
    "is_authentication_error",
    "is_validation_error",
    "is_not_found_error",
    "is_rate_limit_error",
    "is_server_error",
    "is_api_error",
    # Models
    "APIErrorPayload",
    "CheckoutRequest",
    "CheckoutResponse",
    "CreateProductRequest",
    "Customer",
    "CustomerData",
    "CustomerList",
    "CustomerReference",
    "Product",
    "ProductList",
    "Subscription",
    "SubscriptionList",
    "Transaction",
    "TransactionList",
    "UpdateProductRequest",
    # Client
    "BagelPayClient",
    "create_test_client",
    "create_live_client",
    # Webhooks
    "WebhookHandler",
    "WebhookEvent",
    "WebhookVerificationError",
    "compute_webhook_signature",
    "verify_webhook_signature",
]
