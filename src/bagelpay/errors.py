"""
BagelPay error types.

Every failure surfaces as a BagelPayError. Failures reported by the
API itself are BagelPayAPIError subclasses chosen from the HTTP status:

    try:
        client.products.retrieve("prod_123")
    except BagelPayNotFoundError:
        ...
    except BagelPayAPIError as e:
        logger.error(e.format_details())
"""

from typing import Optional

from .models import APIErrorPayload


class BagelPayError(Exception):
    """Base exception for all SDK errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def unwrap(self) -> Optional[BaseException]:
        """Return the underlying exception, if any."""
        return self.cause

    def __str__(self):
        if self.cause is not None:
            return f"BagelPay error: {self.message} (caused by: {self.cause})"
        return f"BagelPay error: {self.message}"


class BagelPayAPIError(BagelPayError):
    """The API answered with an error status."""

    default_status_code: Optional[int] = None
    prefix: Optional[str] = None

    def __init__(
        self,
        message: str = None,
        status_code: int = None,
        error_code: str = None,
        api_error: APIErrorPayload = None,
        cause: BaseException = None
    ):
        if message is None:
            message = api_error.message if api_error is not None else "API request failed"
        if error_code is None:
            error_code = str(api_error.code) if api_error is not None and api_error.code else ""
        if status_code is None:
            status_code = self.default_status_code or 0

        super().__init__(message, cause)
        self.status_code = status_code
        self.error_code = error_code
        self.api_error = api_error

    def __str__(self):
        if self.prefix:
            return f"{self.prefix}: {self.message}"
        return f"BagelPay API error (status {self.status_code}): {self.message}"

    def format_details(self) -> str:
        """Single-line rendering for logs: message | Status: N | Code: C."""
        parts = [self.message]
        if self.status_code and self.status_code > 0:
            parts.append(f"Status: {self.status_code}")
        if self.error_code:
            parts.append(f"Code: {self.error_code}")
        return " | ".join(parts)


class BagelPayAuthenticationError(BagelPayAPIError):
    """Invalid or missing API key."""
    default_status_code = 401
    prefix = "BagelPay authentication error"


class BagelPayValidationError(BagelPayAPIError):
    """Invalid request parameters."""
    default_status_code = 400
    prefix = "BagelPay validation error"


class BagelPayNotFoundError(BagelPayAPIError):
    """Requested resource does not exist."""
    default_status_code = 404
    prefix = "BagelPay not found error"


class BagelPayRateLimitError(BagelPayAPIError):
    """Too many requests."""
    default_status_code = 429
    prefix = "BagelPay rate limit error"


class BagelPayServerError(BagelPayAPIError):
    """The API failed on its side (5xx)."""
    default_status_code = 500
    prefix = "BagelPay server error"


_STATUS_ERRORS = {
    401: BagelPayAuthenticationError,
    400: BagelPayValidationError,
    404: BagelPayNotFoundError,
    429: BagelPayRateLimitError,
}


def error_for_status(status_code: int, payload: APIErrorPayload) -> BagelPayAPIError:
    """Convert an HTTP error status and its payload to the matching exception."""
    error_class = _STATUS_ERRORS.get(status_code)
    if error_class is None:
        error_class = BagelPayServerError if status_code >= 500 else BagelPayAPIError
    return error_class(status_code=status_code, api_error=payload)


# =============================================================================
# Type checks
# =============================================================================

def is_authentication_error(err: BaseException) -> bool:
    return isinstance(err, BagelPayAuthenticationError)


def is_validation_error(err: BaseException) -> bool:
    return isinstance(err, BagelPayValidationError)


def is_not_found_error(err: BaseException) -> bool:
    return isinstance(err, BagelPayNotFoundError)


def is_rate_limit_error(err: BaseException) -> bool:
    return isinstance(err, BagelPayRateLimitError)


def is_server_error(err: BaseException) -> bool:
    return isinstance(err, BagelPayServerError)


def is_api_error(err: BaseException) -> bool:
    """True for any error reported by the API, whatever its kind."""
    return isinstance(err, BagelPayAPIError)
