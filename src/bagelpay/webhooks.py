"""
BagelPay Webhook Handling

BagelPay signs every webhook with HMAC-SHA256 over
"<timestamp>.<raw body>" using your webhook secret. The timestamp
and signature arrive in the "timestamp" and "bagelpay-signature"
headers.

Key principles:
1. ALWAYS verify the signature first, against the raw body
2. Handle events you care about, ignore others
3. Return 200 quickly to prevent redelivery
"""

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .constants import (
    WEBHOOK_SIGNATURE_HEADER,
    WEBHOOK_TIMESTAMP_HEADER,
    WebhookEventType,
)

logger = logging.getLogger(__name__)

Payload = Union[bytes, str]


class WebhookVerificationError(Exception):
    """Raised when a webhook signature or payload is invalid."""
    pass


def _signed_bytes(payload: Payload, timestamp: str) -> bytes:
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    elif not isinstance(payload, (bytes, bytearray)):
        raise TypeError(f"payload must be bytes or str, not {type(payload).__name__}")
    if not isinstance(timestamp, str):
        raise TypeError(f"timestamp must be str, not {type(timestamp).__name__}")
    return timestamp.encode("utf-8") + b"." + bytes(payload)


def compute_webhook_signature(payload: Payload, timestamp: str, secret: str) -> str:
    """
    Compute the hex HMAC-SHA256 signature BagelPay sends for a payload.

    Args:
        payload: Raw request body
        timestamp: Value of the timestamp header
        secret: Webhook signing secret

    Returns:
        Lowercase hex digest
    """
    if not isinstance(secret, str):
        raise TypeError(f"secret must be str, not {type(secret).__name__}")
    return hmac.new(
        secret.encode("utf-8"),
        _signed_bytes(payload, timestamp),
        hashlib.sha256
    ).hexdigest()


def verify_webhook_signature(payload: Payload, timestamp: str, signature: str, secret: str) -> bool:
    """
    Check a webhook signature.

    Returns False on mismatch; only raises TypeError for arguments
    of the wrong type.
    """
    if not isinstance(signature, str):
        raise TypeError(f"signature must be str, not {type(signature).__name__}")
    expected = compute_webhook_signature(payload, timestamp, secret)

    # Constant-time comparison (prevents timing attacks)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


@dataclass
class WebhookEvent:
    """Parsed webhook event."""
    event_type: str
    data: Dict[str, Any]
    raw_payload: Payload

    @property
    def object(self) -> Dict:
        """Get the main object from the event data."""
        return self.data.get("object") or {}

    @property
    def is_recognized(self) -> bool:
        return WebhookEventType.is_known(self.event_type)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


class WebhookHandler:
    """
    Handler for processing incoming BagelPay webhooks.

    Usage:
        handler = WebhookHandler(secret="whsec_...")

        @handler.on(WebhookEventType.CHECKOUT_COMPLETED)
        def handle_checkout_completed(event):
            order_id = event.object.get("metadata", {}).get("order_id")
            fulfill_order(order_id)

        # In your web framework route:
        def webhook_route(request):
            try:
                handler.handle_request(request.body, request.headers)
                return Response(status=200)
            except WebhookVerificationError:
                return Response(status=401)
    """

    def __init__(self, secret: str, tolerance: int = None):
        """
        Initialize the webhook handler.

        Args:
            secret: Webhook signing secret (from the BagelPay dashboard)
            tolerance: Max timestamp age in seconds; None disables the check
        """
        self.secret = secret
        self.tolerance = tolerance
        self._handlers: Dict[str, List[Callable[[WebhookEvent], None]]] = {}

    def verify(self, payload: Payload, timestamp: str, signature: str) -> bool:
        """
        Verify the webhook signature.

        Raises:
            WebhookVerificationError if invalid
        """
        if not timestamp or not signature:
            raise WebhookVerificationError("Missing timestamp or signature")

        if self.tolerance is not None:
            try:
                age = abs(int(time.time()) - int(timestamp))
            except ValueError as e:
                raise WebhookVerificationError(f"Invalid timestamp: {timestamp!r}") from e
            if age > self.tolerance:
                raise WebhookVerificationError(f"Timestamp too old: {age} seconds")

        if not verify_webhook_signature(payload, timestamp, signature, self.secret):
            raise WebhookVerificationError("Signature mismatch")
        return True

    def parse_event(self, payload: Payload) -> WebhookEvent:
        """Parse webhook payload into an event object."""
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise WebhookVerificationError(f"Invalid payload: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("event_type"), str):
            raise WebhookVerificationError("Invalid payload: missing event_type")

        return WebhookEvent(event_type=data["event_type"], data=data, raw_payload=payload)

    def on(self, event_type: Union[str, WebhookEventType]):
        """
        Decorator to register an event handler.

        Usage:
            @handler.on("subscription.canceled")
            def handle_cancel(event):
                revoke_access(event.object)
        """
        def decorator(func: Callable[[WebhookEvent], None]):
            self.register_handler(event_type, func)
            return func
        return decorator

    def register_handler(self, event_type: Union[str, WebhookEventType], handler: Callable):
        """Register a handler function for an event type."""
        key = event_type.value if isinstance(event_type, WebhookEventType) else event_type
        self._handlers.setdefault(key, []).append(handler)

    def handle(self, payload: Payload, timestamp: str, signature: str) -> WebhookEvent:
        """
        Verify and dispatch an incoming webhook.

        Returns:
            The parsed WebhookEvent

        Raises:
            WebhookVerificationError if the signature or payload is invalid
        """
        self.verify(payload, timestamp, signature)
        event = self.parse_event(payload)

        if not event.is_recognized:
            logger.warning("Ignoring unrecognized webhook event type: %s", event.event_type)

        handlers = self._handlers.get(event.event_type, [])
        if not handlers:
            logger.debug("No handler registered for %s", event.event_type)

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # One failing handler must not block the others
                logger.exception("Webhook handler %r failed for %s", handler, event.event_type)

        return event

    def handle_request(self, body: Payload, headers: Mapping[str, str]) -> WebhookEvent:
        """Handle a webhook given the raw body and the request headers."""
        return self.handle(
            body,
            _header(headers, WEBHOOK_TIMESTAMP_HEADER) or "",
            _header(headers, WEBHOOK_SIGNATURE_HEADER) or "",
        )
