"""One user turn: classify, generate, speak, log."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from empathyai import emotions
from empathyai.errors import (
    ClassificationError,
    EmptyInputError,
    GenerationError,
    ProviderError,
)
from empathyai.logging_utils import preview
from empathyai.models import Entry, Sender
from empathyai.playback import SpeechPlayer
from empathyai.providers.base import AssistantBackend
from empathyai.transcript import TranscriptStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class TurnPipeline:
    """Runs a turn against the backend and records it in the transcript.

    A successful turn appends exactly three entries: the user's text, the
    emotion tag and the assistant reply. The user's entry is appended before
    any backend call so it survives a failed turn.
    """

    def __init__(
        self,
        store: TranscriptStore,
        backend: AssistantBackend,
        player: Optional[SpeechPlayer] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.backend = backend
        self.player = player
        self.on_progress = on_progress

    def _progress(self, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(message)

    def _fail(self, message: str) -> None:
        self.store.append(Entry.create(Sender.STATUS, message))

    async def process_turn(self, text: str, language: str, *, speak: bool = True) -> List[Entry]:
        text = (text or "").strip()
        if not text:
            raise EmptyInputError("No text to process.")

        user_entry = Entry.create(Sender.USER, text)
        self.store.append(user_entry)
        logger.info("Turn started (%s): %s", language, preview(text))

        self._progress("Analyzing emotion...")
        try:
            result = await self.backend.classify_emotion(text, language)
        except (ProviderError, ValueError) as e:
            logger.warning("Emotion classification failed: %s", e)
            self._fail(f"Error analyzing emotion: {e}")
            raise ClassificationError(str(e)) from e

        confidence = emotions.clamp_confidence(result.confidence)
        if confidence != result.confidence:
            logger.debug("Clamped confidence %r to %.2f", result.confidence, confidence)
        emotion_entry = Entry.create(
            Sender.EMOTION_TAG,
            emotions.describe(result.emotion, confidence),
            emotion=result.emotion,
            confidence=confidence,
        )
        self.store.append(emotion_entry)

        self._progress("Generating response...")
        try:
            reply = await self.backend.generate_response(text, result.emotion, language)
        except (ProviderError, ValueError) as e:
            logger.warning("Response generation failed: %s", e)
            self._fail(f"Error generating response: {e}")
            raise GenerationError(str(e)) from e

        assistant_entry = Entry.create(
            Sender.ASSISTANT, reply, emotion=result.emotion, confidence=confidence
        )
        self.store.append(assistant_entry)
        logger.info("Turn complete: emotion=%s confidence=%.2f", result.emotion, confidence)

        if speak and self.player is not None:
            self.player.speak(reply, language)

        return [user_entry, emotion_entry, assistant_entry]
