"""Shared test fixtures for notes_to_notion."""

import asyncio

import pytest

from notes_to_notion.config import PodConfig
from notes_to_notion.models import Document
from notes_to_notion.rate_limiter import RateLimiter


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class FakeNotion:
    """Async stand-in for the Notion client; fails for the titles it is told to."""

    def __init__(self, clock=None, fail_titles=()):
        self.clock = clock
        self.fail_titles = set(fail_titles)
        self.calls: list[dict] = []
        self.call_times: list[float] = []

    async def create_page(self, payload: dict) -> dict:
        title = payload["properties"]["title"]["title"][0]["text"]["content"]
        self.calls.append(payload)
        if self.clock is not None:
            self.call_times.append(self.clock())
        await asyncio.sleep(0)
        if title in self.fail_titles:
            raise RuntimeError(f"Notion rejected {title}")
        return {"id": f"page-{title}", "url": f"https://notion.so/page-{title}"}


def make_documents(count: int) -> list[Document]:
    return [Document(id=f"note-{i}", title=f"Title {i}", body=f"Body of note {i}") for i in range(count)]


@pytest.fixture
def pod_config():
    return PodConfig(connection_id="conn-1", parent_page_id="parent-123")


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fast_limiter(fake_clock):
    return RateLimiter(1000, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
