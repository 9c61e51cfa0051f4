"""Shared fixtures: in-memory storage, a settable clock and a fake OpenAI client."""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from logo_studio.services.usage_quota import MemoryStorage, UsageQuotaTracker


class FakeClock:
    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


class FakeOpenAI:
    """Records calls and returns canned responses, or raises a given error."""

    def __init__(self, text="A bold concept.", image_b64="aGVsbG8=", error=None):
        self.calls = []
        self._text = text
        self._image_b64 = image_b64
        self._error = error
        self.responses = SimpleNamespace(create=self._create_response)
        self.images = SimpleNamespace(generate=self._generate_image)

    def _create_response(self, **kwargs):
        self.calls.append(("responses", kwargs))
        if self._error is not None:
            raise self._error
        return SimpleNamespace(output_text=self._text)

    def _generate_image(self, **kwargs):
        self.calls.append(("images", kwargs))
        if self._error is not None:
            raise self._error
        data = [] if self._image_b64 is None else [SimpleNamespace(b64_json=self._image_b64)]
        return SimpleNamespace(data=data)


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 14))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def tracker(storage, clock):
    return UsageQuotaTracker(storage, daily_limit=5, key="usage", clock=clock)


@pytest.fixture
def fake_openai():
    return FakeOpenAI
