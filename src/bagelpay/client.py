"""
BagelPay API Client

This is what a merchant's backend uses to talk to BagelPay.

Example usage:
    client = BagelPayClient(api_key="bagel_test_...", test_mode=True)

    # Create a checkout session and redirect the payer
    checkout = client.checkouts.create(CheckoutRequest(
        product_id="prod_123",
        customer=Customer(email="payer@example.com"),
    ))
    redirect(checkout.checkout_url)

Every call sends exactly one HTTP request. Errors are raised as
BagelPayError subclasses and are never retried by the client.
"""

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Callable, Dict, Optional

from .config import ClientConfig
from .constants import API_KEY_HEADER, Config, Endpoints
from .errors import BagelPayError, error_for_status
from .models import (
    APIErrorPayload,
    CheckoutRequest,
    CheckoutResponse,
    CreateProductRequest,
    CustomerList,
    Model,
    Product,
    ProductList,
    Subscription,
    SubscriptionList,
    TransactionList,
    UpdateProductRequest,
)


def _page_params(page_num: int, page_size: int) -> Dict[str, str]:
    """Pagination query; values <= 0 are left out."""
    params = {}
    if page_num and page_num > 0:
        params[Config.PAGE_NUM_PARAM] = str(page_num)
    if page_size and page_size > 0:
        params[Config.PAGE_SIZE_PARAM] = str(page_size)
    return params


def _path(template: str, resource_id: str) -> str:
    return template.format(id=urllib.parse.quote(str(resource_id), safe=""))


class APIResource:
    """Base class for API resources."""

    def __init__(self, client: 'BagelPayClient'):
        self.client = client

    def _request(self, method: str, path: str, parse: Callable, **kwargs):
        return self.client._request(method, path, parse, **kwargs)

    def _record(self, model_class):
        """Parser for endpoints that wrap a single record in {"data": ...}."""
        def parse(body: Dict) -> Any:
            return model_class.from_dict(body.get("data") or {})
        return parse


class CheckoutsResource(APIResource):
    """
    Checkout API.

    A checkout session is a time-limited payment page for one product.
    """

    def create(self, request: CheckoutRequest, timeout: float = None) -> CheckoutResponse:
        """
        Create a checkout session.

        Args:
            request: Product, customer and redirect settings
            timeout: Per-call timeout in seconds (default: client timeout)

        Returns:
            The session, including checkout_url and expires_on
        """
        return self._request(
            "POST", Endpoints.CHECKOUTS, self._record(CheckoutResponse),
            data=request, timeout=timeout
        )


class ProductsResource(APIResource):
    """Products API."""

    def create(self, request: CreateProductRequest, timeout: float = None) -> Product:
        """Create a product."""
        return self._request(
            "POST", Endpoints.PRODUCT_CREATE, self._record(Product),
            data=request, timeout=timeout
        )

    def retrieve(self, product_id: str, timeout: float = None) -> Product:
        """Retrieve a product by ID."""
        return self._request(
            "GET", _path(Endpoints.PRODUCT, product_id), self._record(Product),
            timeout=timeout
        )

    def list(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> ProductList:
        """
        List products, one page at a time.

        Args:
            page_num: 1-based page number (omitted when <= 0)
            page_size: Items per page (omitted when <= 0)
        """
        return self._request(
            "GET", Endpoints.PRODUCT_LIST, ProductList.from_dict,
            params=_page_params(page_num, page_size), timeout=timeout
        )

    def update(self, request: UpdateProductRequest, timeout: float = None) -> Product:
        """
        Update a product. Only fields set on the request are sent.

        The server may treat this as a full replace, so include every
        field that should keep its current value.
        """
        return self._request(
            "POST", Endpoints.PRODUCT_UPDATE, self._record(Product),
            data=request, timeout=timeout
        )

    def archive(self, product_id: str, timeout: float = None) -> Product:
        """Archive a product so it can no longer be purchased."""
        return self._request(
            "POST", _path(Endpoints.PRODUCT_ARCHIVE, product_id), self._record(Product),
            timeout=timeout
        )

    def unarchive(self, product_id: str, timeout: float = None) -> Product:
        """Restore an archived product."""
        return self._request(
            "POST", _path(Endpoints.PRODUCT_UNARCHIVE, product_id), self._record(Product),
            timeout=timeout
        )


class TransactionsResource(APIResource):
    """Transactions API (read only)."""

    def list(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> TransactionList:
        return self._request(
            "GET", Endpoints.TRANSACTION_LIST, TransactionList.from_dict,
            params=_page_params(page_num, page_size), timeout=timeout
        )


class SubscriptionsResource(APIResource):
    """Subscriptions API."""

    def list(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> SubscriptionList:
        return self._request(
            "GET", Endpoints.SUBSCRIPTION_LIST, SubscriptionList.from_dict,
            params=_page_params(page_num, page_size), timeout=timeout
        )

    def retrieve(self, subscription_id: str, timeout: float = None) -> Subscription:
        """Retrieve a subscription by ID."""
        return self._request(
            "GET", _path(Endpoints.SUBSCRIPTION, subscription_id), self._record(Subscription),
            timeout=timeout
        )

    def cancel(self, subscription_id: str, timeout: float = None) -> Subscription:
        """
        Cancel a subscription.

        Returns the updated subscription; check cancel_at for when
        the cancellation takes effect.
        """
        return self._request(
            "POST", _path(Endpoints.SUBSCRIPTION_CANCEL, subscription_id), self._record(Subscription),
            timeout=timeout
        )


class CustomersResource(APIResource):
    """Customers API (read only)."""

    def list(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> CustomerList:
        return self._request(
            "GET", Endpoints.CUSTOMER_LIST, CustomerList.from_dict,
            params=_page_params(page_num, page_size), timeout=timeout
        )


class BagelPayClient:
    """
    BagelPay API Client.

    Usage:
        client = BagelPayClient(api_key="bagel_test_...")

        product = client.products.create(CreateProductRequest(
            name="Pro Plan",
            price=29.99,
            currency="USD",
            billing_type="subscription",
            recurring_interval="monthly",
            trial_days=7,
        ))

        page = client.products.list(page_num=1, page_size=5)

    The client keeps no per-request state, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        api_key: str = None,
        test_mode: bool = True,
        base_url: str = None,
        timeout: float = None,
        opener: urllib.request.OpenerDirector = None,
        config: ClientConfig = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Your BagelPay API key
            test_mode: Use https://test.bagelpay.io instead of live (default True)
            base_url: Custom API base URL, overrides test_mode
            timeout: Request timeout in seconds (default 30)
            opener: urllib opener used to send requests (default: build_opener())
            config: Prebuilt ClientConfig; the other settings are ignored when given
        """
        if config is None:
            config_kwargs = {"api_key": api_key, "test_mode": test_mode, "base_url": base_url}
            if timeout is not None:
                config_kwargs["timeout"] = timeout
            config = ClientConfig(**config_kwargs)

        self.config = config
        self._opener = opener or urllib.request.build_opener()

        # Initialize resources
        self.checkouts = CheckoutsResource(self)
        self.products = ProductsResource(self)
        self.transactions = TransactionsResource(self)
        self.subscriptions = SubscriptionsResource(self)
        self.customers = CustomersResource(self)

    @classmethod
    def from_config(cls, config: ClientConfig, opener: urllib.request.OpenerDirector = None) -> 'BagelPayClient':
        return cls(config=config, opener=opener)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def timeout(self) -> float:
        return self.config.timeout

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _build_url(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        url = f"{self.config.base_url}{path}"
        if params:
            query = {k: v for k, v in params.items() if v is not None and v != ""}
            if query:
                url = f"{url}?{urllib.parse.urlencode(sorted(query.items()))}"
        return url

    def _encode_body(self, method: str, data: Any) -> Optional[bytes]:
        if data is None or method not in Config.BODY_METHODS:
            return None
        if isinstance(data, Model):
            data = data.to_dict()
        try:
            return json.dumps(data).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise BagelPayError("failed to marshal request data", e) from e

    def _build_request(self, method: str, path: str, data: Any = None,
                       params: Dict[str, str] = None) -> urllib.request.Request:
        """
        Build the HTTP request.

        Sets:
        - API key authentication via the x-api-key header
        - JSON body for POST/PUT/PATCH
        - SDK user agent
        """
        url = self._build_url(path, params)
        body = self._encode_body(method, data)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
            API_KEY_HEADER: self.config.api_key,
        }
        try:
            return urllib.request.Request(url, data=body, headers=headers, method=method)
        except ValueError as e:
            raise BagelPayError("invalid URL", e) from e

    def _send(self, request: urllib.request.Request, timeout: float = None):
        """Send the request and return (status, body bytes)."""
        if timeout is None:
            timeout = self.config.timeout
        elif timeout <= 0:
            raise BagelPayError(f"timeout must be positive, got {timeout!r}")
        try:
            with self._opener.open(request, timeout=timeout) as response:
                status = getattr(response, "status", None) or response.getcode()
                return status, response.read()
        except urllib.error.HTTPError as e:
            try:
                return e.code, e.read()
            except OSError as read_error:
                raise BagelPayError("failed to read response body", read_error) from read_error
            finally:
                e.close()
        except (urllib.error.URLError, OSError, ValueError) as e:
            # ValueError: http.client rejects bad ports and header values at send time
            raise BagelPayError("request failed", e) from e

    def _handle_response(self, status: int, body: bytes, parse: Callable) -> Any:
        """Decode a successful body or raise the classified API error."""
        if status >= 400:
            raise error_for_status(status, self._parse_error(status, body))

        try:
            decoded = json.loads(body)
            if not isinstance(decoded, dict):
                raise ValueError(f"expected a JSON object, got {type(decoded).__name__}")
            return parse(decoded)
        except (TypeError, ValueError) as e:
            raise BagelPayError("failed to parse response", e) from e

    def _parse_error(self, status: int, body: bytes) -> APIErrorPayload:
        text = body.decode("utf-8", errors="replace")
        try:
            decoded = json.loads(text)
        except ValueError:
            return APIErrorPayload.fallback(status, text)

        if not isinstance(decoded, dict):
            return APIErrorPayload.fallback(status, text)

        code = decoded.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            code = 0
        # Keep the API's own code even when it sends no message
        message = decoded.get("message")
        if not message:
            message = APIErrorPayload.fallback(status, text).message
        details = decoded.get("details")
        return APIErrorPayload(
            code=code,
            message=str(message),
            details=None if details is None else str(details),
        )

    def _request(
        self,
        method: str,
        path: str,
        parse: Callable,
        data: Any = None,
        params: Dict[str, str] = None,
        timeout: float = None
    ) -> Any:
        """
        Make an HTTP request to the API.

        Handles:
        - Request building and JSON encoding
        - Sending through the shared opener
        - Error classification by HTTP status
        - JSON decoding into the response model
        """
        request = self._build_request(method, path, data, params)
        status, body = self._send(request, timeout)
        return self._handle_response(status, body, parse)

    # -------------------------------------------------------------------------
    # Flat aliases
    # -------------------------------------------------------------------------

    def create_checkout(self, request: CheckoutRequest, timeout: float = None) -> CheckoutResponse:
        return self.checkouts.create(request, timeout=timeout)

    def create_product(self, request: CreateProductRequest, timeout: float = None) -> Product:
        return self.products.create(request, timeout=timeout)

    def get_product(self, product_id: str, timeout: float = None) -> Product:
        return self.products.retrieve(product_id, timeout=timeout)

    def list_products(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> ProductList:
        return self.products.list(page_num, page_size, timeout=timeout)

    def update_product(self, request: UpdateProductRequest, timeout: float = None) -> Product:
        return self.products.update(request, timeout=timeout)

    def archive_product(self, product_id: str, timeout: float = None) -> Product:
        return self.products.archive(product_id, timeout=timeout)

    def unarchive_product(self, product_id: str, timeout: float = None) -> Product:
        return self.products.unarchive(product_id, timeout=timeout)

    def list_transactions(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> TransactionList:
        return self.transactions.list(page_num, page_size, timeout=timeout)

    def list_subscriptions(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> SubscriptionList:
        return self.subscriptions.list(page_num, page_size, timeout=timeout)

    def get_subscription(self, subscription_id: str, timeout: float = None) -> Subscription:
        return self.subscriptions.retrieve(subscription_id, timeout=timeout)

    def cancel_subscription(self, subscription_id: str, timeout: float = None) -> Subscription:
        return self.subscriptions.cancel(subscription_id, timeout=timeout)

    def list_customers(self, page_num: int = 0, page_size: int = 0, timeout: float = None) -> CustomerList:
        return self.customers.list(page_num, page_size, timeout=timeout)


# =============================================================================
# Convenience constructors
# =============================================================================

def create_test_client(api_key: str, **kwargs) -> BagelPayClient:
    """Client for https://test.bagelpay.io."""
    return BagelPayClient(api_key, test_mode=True, **kwargs)


def create_live_client(api_key: str, **kwargs) -> BagelPayClient:
    """Client for https://live.bagelpay.io."""
    return BagelPayClient(api_key, test_mode=False, **kwargs)
