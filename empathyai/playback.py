"""Speech playback abstraction."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from empathyai.events import EventBus

logger = logging.getLogger(__name__)


class SpeechPlayer(ABC):
    """Abstract interface for speech synthesis.

    At most one utterance is audible: ``speak`` cancels whatever is playing
    before starting the new one.
    """

    def __init__(self):
        self.current: Optional[str] = None  # utterance id

    @property
    def speaking(self) -> bool:
        return self.current is not None

    def speak(self, text: str, language: str) -> Optional[str]:
        """Start speaking ``text`` with a voice for ``language``.

        Returns the utterance id, or None when the engine could not start.
        """
        self.cancel()
        utterance_id = uuid.uuid4().hex
        if self._start(utterance_id, text, language):
            self.current = utterance_id
            return utterance_id
        return None

    def cancel(self) -> None:
        if self.current is None:
            return
        self._stop(self.current)
        self.current = None

    def finished(self, utterance_id: str) -> None:
        """The engine reports that an utterance ended."""
        if utterance_id == self.current:
            self.current = None

    @abstractmethod
    def _start(self, utterance_id: str, text: str, language: str) -> bool:
        pass

    @abstractmethod
    def _stop(self, utterance_id: str) -> None:
        pass


class BrowserSpeechPlayer(SpeechPlayer):
    """Relays utterances to the browser's speech-synthesis engine."""

    def __init__(self, bus: EventBus, available: bool = True):
        super().__init__()
        self._bus = bus
        self.available = available

    def _start(self, utterance_id: str, text: str, language: str) -> bool:
        if not self.available:
            logger.info("Speech synthesis unavailable, skipping playback")
            return False
        self._bus.publish("speech.speak", utterance_id=utterance_id, text=text, lang=language)
        return True

    def _stop(self, utterance_id: str) -> None:
        self._bus.publish("speech.cancel", utterance_id=utterance_id)
