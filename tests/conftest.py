"""
Shared fixtures for exception_alerts tests.

Network access is replaced by ``httpx.MockTransport``; every request a
notifier makes is captured by a ``RecordingTransport``.
"""

import json
from typing import Optional

import httpx
import pytest

from exception_alerts.channels import ExceptionInfo
from exception_alerts.channels.backtrace import BacktraceCleaner

FAKE_BACKTRACE = (
    "backtrace line 1", "backtrace line 2", "backtrace line 3",
    "backtrace line 4", "backtrace line 5", "backtrace line 6",
)
FAKE_CLEANED_BACKTRACE = list(FAKE_BACKTRACE[2:])


class RecordingTransport:
    """Callable handler for httpx.MockTransport that remembers requests."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Optional[dict] = None,
        text: str = "ok",
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, text=self.text)

    def sent_json(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def fake_exception() -> ExceptionInfo:
    return ExceptionInfo("ZeroDivisionError", "exception message", FAKE_BACKTRACE)


@pytest.fixture
def exception_without_backtrace() -> ExceptionInfo:
    return ExceptionInfo("StandardError", "my custom error")


@pytest.fixture
def cleaner() -> BacktraceCleaner:
    """Drops the first two fake frames, like a real cleaner drops framework frames."""
    return BacktraceCleaner(silencers=[lambda line: line in FAKE_BACKTRACE[:2]])


@pytest.fixture
def make_transport():
    """Factory for transports that reply with something other than 200 "ok"."""
    return RecordingTransport
