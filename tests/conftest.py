"""
Shared fixtures for the BagelPay SDK tests.

Run with: python -m pytest tests/ -v
"""

import io
import json
import os
import sys
import urllib.error

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


class FakeResponse:
    """Stands in for the http.client.HTTPResponse urlopen returns."""

    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def getcode(self) -> int:
        return self.status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """
    Records requests and replays scripted responses in order.

    Each scripted response is (status, body) or an exception to raise.
    Status >= 400 is raised as HTTPError, like urllib does.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def add(self, status: int, body):
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.append((status, body))
        return self

    def open(self, request, timeout=None):
        self.requests.append((request, timeout))
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response

        status, body = response
        if status >= 400:
            raise urllib.error.HTTPError(
                request.full_url, status, "error", {}, io.BytesIO(body)
            )
        return FakeResponse(status, body)

    @property
    def last_request(self):
        return self.requests[-1][0]

    @property
    def last_timeout(self):
        return self.requests[-1][1]


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def client(opener):
    from bagelpay import BagelPayClient
    return BagelPayClient(api_key="bagel_test_key", opener=opener)
