"""Pytest fixtures for CyberWatch tests.

Random content is seeded so failures reproduce, but tests assert on
structural properties rather than exact generated values.
"""
import asyncio
import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from cyberwatch.agents.llm_backend import LLMMessage, LLMResponse
from cyberwatch.main import create_app
from cyberwatch.services.alert_store import AlertStore
from cyberwatch.services.mock_data import MockDataGenerator
from cyberwatch.services.session_service import SessionService
from cyberwatch.services.storage import InMemoryStorage
from cyberwatch.services.threat_feed import ThreatFeed

FIXED_NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


class FakeLLMBackend:
    """Stands in for LLMBackend; records every call and replays a canned reply."""

    def __init__(self, content: str = '{"summary": "Short summary."}', delay: float = 0.0):
        self.content = content
        self.delay = delay
        self.calls: list[list[LLMMessage]] = []

    async def complete(self, messages, temperature: float = 0.3, json_output: bool = False) -> LLMResponse:
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        return LLMResponse(content=self.content, model="fake")


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def generator(rng, now):
    return MockDataGenerator(rng, now=now)


@pytest.fixture
def dataset(generator):
    return generator.generate(25)


@pytest.fixture
def threats(dataset):
    return dataset.threats


@pytest.fixture
def feed(threats):
    return ThreatFeed(threats, page_size=9)


@pytest.fixture
def alert_store(dataset):
    return AlertStore(dataset.alert_settings)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def session(storage):
    return SessionService(storage).init()


@pytest.fixture
def fake_llm():
    return FakeLLMBackend()


@pytest.fixture
def client(storage, fake_llm):
    app = create_app(storage=storage, ai_backend=fake_llm, rng=random.Random(99))
    with TestClient(app) as c:
        yield c
