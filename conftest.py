"""Shared fixtures: a scripted transport, a frozen clock and an in-memory store.

Nothing here touches the network or the filesystem.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vidyapith_content.content_service import ContentService
from vidyapith_content.exceptions import FetchError
from vidyapith_content.storage import MemoryStore
from vidyapith_content.transport import TransportResponse


class FakeTransport:
    """
    Scripted transport: responses are queued per URL and served in order.
    The last response for a URL repeats once its queue is down to one.
    An Exception instance in the queue is raised instead of returned.
    """

    def __init__(self):
        self.responses: dict[str, list] = {}
        self.requests: list[str] = []

    def add(self, url: str, body, status_code: int = 200):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.setdefault(url, []).append(TransportResponse(status_code, body))

    def fail(self, url: str, message: str = "connection refused"):
        self.responses.setdefault(url, []).append(
            FetchError(message, category="transport", url=url)
        )

    def raise_on(self, url: str, error: Exception):
        """Queue an arbitrary exception, as a third-party transport might raise."""
        self.responses.setdefault(url, []).append(error)

    def get(self, url: str) -> TransportResponse:
        self.requests.append(url)
        queue = self.responses.get(url)
        if not queue:
            raise FetchError("no scripted response", category="transport", url=url)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(transport, store, clock):
    return ContentService(transport=transport, store=store, clock=clock)
