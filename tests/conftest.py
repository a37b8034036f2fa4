"""Pytest configuration and fixtures."""
import pytest

from empathyai.capture import BrowserCaptureSource
from empathyai.controller import SessionController
from empathyai.errors import ProviderError
from empathyai.events import EventBus
from empathyai.playback import BrowserSpeechPlayer
from empathyai.providers.stub import StubBackend
from empathyai.transcript import TranscriptStore


class FailingClassifierBackend(StubBackend):
    """Stub whose emotion classification always fails."""

    async def classify_emotion(self, text, language_hint=None):
        self.calls.append(("classify", (text, language_hint)))
        raise ProviderError("Rate limit exceeded.", provider="stub", status_code=429)


class FailingGeneratorBackend(StubBackend):
    """Stub whose response generation always fails."""

    async def generate_response(self, user_text, emotion, language_code):
        self.calls.append(("generate", (user_text, emotion, language_code)))
        raise ProviderError("Network connection failed.", provider="stub")


class FailingSummaryBackend(StubBackend):
    async def summarize_dialogue(self, messages):
        self.calls.append(("summarize", tuple(messages)))
        raise ProviderError("HTTP Error 500: boom", provider="stub", status_code=500)


@pytest.fixture
def stub_backend():
    return StubBackend()


@pytest.fixture
def store():
    return TranscriptStore(cap=20)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def capture(bus):
    return BrowserCaptureSource(bus, available=True)


@pytest.fixture
def player(bus):
    return BrowserSpeechPlayer(bus)


@pytest.fixture
def make_controller(bus, capture, player):
    """Build a controller around any backend, sharing the relay fixtures."""

    def _make(backend=None, **kwargs):
        return SessionController(
            backend or StubBackend(),
            capture=capture,
            player=player,
            bus=bus,
            **kwargs,
        )

    return _make


@pytest.fixture
def controller(make_controller, stub_backend):
    return make_controller(stub_backend)
