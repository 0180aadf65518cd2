"""
Pytest configuration and shared fixtures for the Slangify API tests.
"""
import json
import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from config.settings import Settings
from src.api.main import app
from src.core.store import InMemoryStore
from src.models.schemas import TranslationResult
from src.services.llm_service import OpenAIUpstreamClient
from src.services.translation_service import TranslationService, get_translation_service

GENERATIONS = ["Classic", "Baby Boomers", "Gen X", "Millennials", "Gen Z", "Gen Alpha"]


def make_result_payload(text="That's so fetch", generations=None):
    """A well-formed TranslationResult as the model would return it."""
    generations = GENERATIONS if generations is None else generations
    return {
        "detectedGeneration": "Millennials",
        "originalText": text,
        "translations": [
            {
                "generation": generation,
                "text": f"{text} ({generation})",
                "slangWords": [{"word": "fetch", "definition": "cool"}] if generation == "Millennials" else [],
            }
            for generation in generations
        ],
    }


def make_envelope(content):
    """Wrap model content in a chat-completions response body."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return json.dumps({
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    })


def make_http_response(status_code=200, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeUpstream:
    """Records calls and answers with a valid result (or raises ``error``)."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def translate(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return TranslationResult.model_validate(make_result_payload(text))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def valid_payload():
    return make_result_payload()


@pytest.fixture
def make_service(clock, store, upstream):
    """Build a TranslationService with test settings overrides."""
    def _make(upstream_client=None, **overrides):
        return TranslationService(
            Settings(**overrides),
            upstream_client or upstream,
            store=store,
            clock=clock,
        )
    return _make


@pytest.fixture
def make_client(make_service):
    """Create a TestClient whose translate route uses a test service."""
    def _make(upstream_client=None, **overrides):
        service = make_service(upstream_client=upstream_client, **overrides)
        app.dependency_overrides[get_translation_service] = lambda: service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def http_upstream():
    """OpenAIUpstreamClient wired to a mocked requests session."""
    def _make(status_code=200, text="", api_key="sk-test-secret"):
        session = MagicMock()
        session.post.return_value = make_http_response(status_code, text)
        return OpenAIUpstreamClient(api_key=api_key, session=session)
    return _make
