"""Speech capture abstraction.

The speech-recognition engine lives in the browser. ``BrowserCaptureSource``
sends it start/stop commands over the event stream and receives its results
back through the HTTP layer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from empathyai.events import EventBus

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, bool], Awaitable[None]]
ErrorCallback = Callable[[str], Awaitable[None]]
EndCallback = Callable[[], Awaitable[None]]

CAPTURE_ERROR_MESSAGES = {
    "no-speech": "No speech detected. Please try again.",
    "audio-capture": "Audio capture error. Check your microphone.",
    "not-allowed": "Microphone access denied. Please enable microphone permissions.",
}
DEFAULT_CAPTURE_ERROR = "An error occurred during speech recognition."


def capture_error_message(code: str) -> str:
    return CAPTURE_ERROR_MESSAGES.get((code or "").strip().lower(), DEFAULT_CAPTURE_ERROR)


class CaptureSource(ABC):
    """Abstract interface for speech capture engines."""

    def __init__(self):
        self._on_result: Optional[ResultCallback] = None
        self._on_error: Optional[ErrorCallback] = None
        self._on_end: Optional[EndCallback] = None

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether a capture engine exists and may be started."""
        pass

    @abstractmethod
    def start(self, language: str) -> None:
        """Start a single (non-continuous) capture with interim results."""
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

    def on_result(self, callback: ResultCallback) -> None:
        """Register callback(text, is_final)."""
        self._on_result = callback

    def on_error(self, callback: ErrorCallback) -> None:
        """Register callback(code)."""
        self._on_error = callback

    def on_end(self, callback: EndCallback) -> None:
        self._on_end = callback


class BrowserCaptureSource(CaptureSource):
    """Relays capture commands to the browser's speech-recognition engine."""

    def __init__(self, bus: EventBus, available: bool = False):
        super().__init__()
        self._bus = bus
        self._available = available

    @property
    def available(self) -> bool:
        return self._available

    def set_available(self, available: bool) -> None:
        self._available = bool(available)

    def start(self, language: str) -> None:
        self._bus.publish(
            "capture.start",
            lang=language,
            continuous=False,
            interim_results=True,
        )

    def stop(self) -> None:
        self._bus.publish("capture.stop")

    async def deliver_result(self, text: str, is_final: bool) -> None:
        if self._on_result is None:
            logger.warning("Capture result dropped, no listener registered")
            return
        await self._on_result(text, is_final)

    async def deliver_error(self, code: str) -> None:
        if self._on_error is not None:
            await self._on_error(code)

    async def deliver_end(self) -> None:
        if self._on_end is not None:
            await self._on_end()
