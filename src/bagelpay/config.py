"""
Client configuration.

A ClientConfig is built once when a client is created and never
changes afterwards, so one client can be shared across threads.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    Config,
    DEFAULT_LIVE_BASE_URL,
    DEFAULT_TEST_BASE_URL,
    DEFAULT_TIMEOUT,
    USER_AGENT,
)
from .errors import BagelPayError

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable settings for a BagelPayClient.

    Args:
        api_key: Your BagelPay API key (required)
        test_mode: Use the test environment (default True)
        base_url: Custom API base URL, overrides test_mode
        timeout: Request timeout in seconds
    """
    api_key: str
    test_mode: bool = True
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = USER_AGENT

    def __post_init__(self):
        if not self.api_key:
            raise BagelPayError("API key is required")
        if self.timeout is None:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT)
        elif self.timeout <= 0:
            raise BagelPayError(f"timeout must be positive, got {self.timeout!r}")

        base_url = self.base_url
        if not base_url:
            base_url = DEFAULT_TEST_BASE_URL if self.test_mode else DEFAULT_LIVE_BASE_URL
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from BAGELPAY_* environment variables.

        BAGELPAY_API_KEY must be set; there is no fallback key.
        """
        env = os.environ if environ is None else environ

        api_key = env.get(Config.ENV_API_KEY, "")
        if not api_key:
            raise BagelPayError(f"{Config.ENV_API_KEY} environment variable is required")

        test_mode = env.get(Config.ENV_TEST_MODE, "true").strip().lower() not in _FALSE_VALUES

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get(Config.ENV_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise BagelPayError(f"invalid {Config.ENV_TIMEOUT} value: {raw_timeout!r}", e) from e

        return cls(
            api_key=api_key,
            test_mode=test_mode,
            base_url=env.get(Config.ENV_BASE_URL) or None,
            timeout=timeout,
        )
