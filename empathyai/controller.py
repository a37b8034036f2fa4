"""Session controller: capture state machine and turn sequencing."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from empathyai.capture import BrowserCaptureSource, CaptureSource, capture_error_message
from empathyai.errors import (
    CaptureUnavailableError,
    ClassificationError,
    EmptyInputError,
    GenerationError,
    NothingToSummarizeError,
    SummarizeError,
)
from empathyai.events import EventBus
from empathyai.languages import resolve_language
from empathyai.logging_utils import preview
from empathyai.models import CaptureState, Entry, Sender
from empathyai.pipeline import TurnPipeline
from empathyai.playback import BrowserSpeechPlayer, SpeechPlayer
from empathyai.providers.base import AssistantBackend
from empathyai.state import IDLE_STATUS, SessionState
from empathyai.summarizer import Summarizer
from empathyai.transcript import TranscriptStore

logger = logging.getLogger(__name__)


class SessionController:
    """Owns one conversation session.

    States move ``idle -> listening -> processing -> idle``; typed input goes
    ``idle -> processing`` directly. Every exit from ``processing``, failed
    or not, lands in ``idle``. Requests that arrive while a capture or a turn
    is in progress are rejected rather than queued.

    All methods run on one event loop. State is checked and changed before
    the first ``await``, so two requests can never both enter ``processing``.
    """

    def __init__(
        self,
        backend: AssistantBackend,
        capture: Optional[CaptureSource] = None,
        player: Optional[SpeechPlayer] = None,
        bus: Optional[EventBus] = None,
        cap: int = 20,
        language: str = "en-US",
        audio_enabled: bool = True,
    ):
        self.bus = bus or EventBus()
        self.capture = capture if capture is not None else BrowserCaptureSource(self.bus)
        self.player = player if player is not None else BrowserSpeechPlayer(self.bus)
        self.backend = backend

        self.state = SessionState(language=resolve_language(language), audio_enabled=audio_enabled)
        self.store = TranscriptStore(cap)
        self.store.subscribe(self._on_entry)

        self.pipeline = TurnPipeline(self.store, backend, self.player, on_progress=self._set_status)
        self.summarizer = Summarizer(backend)

        self.capture.on_result(self._on_capture_result)
        self.capture.on_error(self.capture_error)
        self.capture.on_end(self.capture_ended)

    # -- helpers -----------------------------------------------------------

    @property
    def capture_state(self) -> CaptureState:
        return self.state.capture_state

    @property
    def last_summary(self) -> Optional[str]:
        if self.state.summary_revision != self.store.revision:
            return None
        return self.state.last_summary

    def _set_state(self, new: CaptureState) -> None:
        old = self.state.capture_state
        if old == new:
            return
        self.state.capture_state = new
        logger.debug("Capture state %s -> %s", old.value, new.value)
        self.bus.publish("state", capture_state=new.value)

    def _set_status(self, message: str) -> None:
        self.state.status_message = message
        self.bus.publish("status", message=message)

    def _notify(self, title: str, description: str, variant: str = "destructive") -> None:
        self.bus.publish("notify", title=title, description=description, variant=variant)

    def _status_entry(self, text: str) -> None:
        self.store.append(Entry.create(Sender.STATUS, text))

    def _on_entry(self, entry: Entry) -> None:
        if self.state.invalidate_summary():
            logger.info("Summary invalidated by new entry")
            self.bus.publish("summary", summary=None)
        self.bus.publish("entry", entry=entry.to_dict())

    # -- capture -----------------------------------------------------------

    def start_capture(self) -> bool:
        """Begin listening. Returns False when busy; raises when capture is unavailable."""
        if self.state.capture_state != CaptureState.IDLE:
            logger.info("Capture start rejected while %s", self.state.capture_state.value)
            return False

        if not self.capture.available:
            message = "Speech recognition is not available. You can still type your message."
            self._set_status(message)
            self._status_entry("Microphone unavailable.")
            self._notify("Microphone Access", message)
            raise CaptureUnavailableError(message)

        self.capture.start(self.state.language)
        self._set_state(CaptureState.LISTENING)
        self._set_status("Listening...")
        return True

    def stop_capture(self) -> bool:
        if self.state.capture_state != CaptureState.LISTENING:
            return False
        self.capture.stop()
        self._set_state(CaptureState.IDLE)
        self._set_status(IDLE_STATUS)
        return True

    async def _on_capture_result(self, text: str, is_final: bool) -> None:
        if not is_final:
            if self.state.capture_state == CaptureState.LISTENING and text:
                self._set_status(f"Listening... {text}")
            return
        await self.final_transcript_received(text)

    async def final_transcript_received(self, text: str) -> Optional[List[Entry]]:
        if self.state.capture_state != CaptureState.LISTENING:
            logger.warning("Ignoring transcript while %s: %s", self.state.capture_state.value, preview(text))
            return None
        return await self._run_turn(text, voice=True)

    async def capture_error(self, code: str) -> Optional[str]:
        if self.state.capture_state != CaptureState.LISTENING:
            logger.warning("Ignoring capture error '%s' while %s", code, self.state.capture_state.value)
            return None
        message = capture_error_message(code)
        logger.info("Capture error '%s': %s", code, message)
        self._set_state(CaptureState.IDLE)
        self._set_status(message)
        self._status_entry(f"Error: {message}")
        self._notify("Speech Recognition Error", message)
        return message

    async def capture_ended(self) -> None:
        # capture finished without a final transcript
        if self.state.capture_state == CaptureState.LISTENING:
            self._set_state(CaptureState.IDLE)
            self._set_status(IDLE_STATUS)

    # -- turns -------------------------------------------------------------

    async def submit_text(self, text: str) -> Optional[List[Entry]]:
        """Process typed input. Returns None when the session is busy."""
        if self.state.capture_state != CaptureState.IDLE:
            logger.info("Text submission rejected while %s", self.state.capture_state.value)
            return None
        return await self._run_turn(text, voice=False)

    async def _run_turn(self, text: str, voice: bool) -> List[Entry]:
        self._set_state(CaptureState.PROCESSING)
        try:
            return await self.pipeline.process_turn(
                text, self.state.language, speak=self.state.audio_enabled
            )
        except EmptyInputError:
            message = "No speech detected. Tap to try again." if voice else "Please enter a message."
            self._status_entry(message)
            self._notify("Nothing to send", message, variant="default")
            raise
        except (ClassificationError, GenerationError):
            # the pipeline already logged the failure in the transcript
            self._notify("AI Error", "Could not get response from AI.")
            raise
        finally:
            self._set_state(CaptureState.IDLE)
            self._set_status(IDLE_STATUS)

    # -- summary -----------------------------------------------------------

    async def summarize(self) -> Optional[str]:
        """Summarize the dialogue so far. Returns None when the session is busy."""
        if self.state.capture_state != CaptureState.IDLE:
            logger.info("Summary rejected while %s", self.state.capture_state.value)
            return None

        snapshot = self.store.snapshot()
        revision = self.store.revision

        self._set_state(CaptureState.PROCESSING)
        self._set_status("Summarizing conversation...")
        try:
            summary = await self.summarizer.summarize(snapshot)
        except NothingToSummarizeError as e:
            self._notify("Cannot Summarize", str(e), variant="default")
            raise
        except SummarizeError:
            self._notify("Summarization Error", "Could not summarize the conversation.")
            raise
        else:
            if self.store.revision == revision:
                self.state.last_summary = summary
                self.state.summary_revision = revision
                self.bus.publish("summary", summary=summary)
                self._notify("Summary Generated", "Conversation summary has been created.", variant="default")
            else:
                logger.info("Discarding summary, transcript changed during the call")
            return summary
        finally:
            self._set_state(CaptureState.IDLE)
            self._set_status(IDLE_STATUS)

    # -- settings ----------------------------------------------------------

    def set_language(self, code: str) -> bool:
        if self.state.capture_state == CaptureState.PROCESSING:
            logger.info("Language change rejected while processing")
            return False
        self.state.language = resolve_language(code)
        self.bus.publish("language", language=self.state.language)
        return True

    def set_audio_enabled(self, enabled: bool) -> None:
        self.state.audio_enabled = bool(enabled)
        if not enabled:
            self.player.cancel()
        self.bus.publish("audio", enabled=self.state.audio_enabled)

    def set_capabilities(self, capture: bool, playback: bool) -> None:
        if isinstance(self.capture, BrowserCaptureSource):
            self.capture.set_available(capture)
        if isinstance(self.player, BrowserSpeechPlayer):
            self.player.available = bool(playback)
        logger.info("Client capabilities: capture=%s playback=%s", capture, playback)

    def playback_finished(self, utterance_id: str) -> None:
        self.player.finished(utterance_id)

    def view(self) -> Dict[str, Any]:
        entries = self.store.snapshot()
        state = self.state.to_dict()
        state["last_summary"] = self.last_summary
        return {
            "state": state,
            "entries": [e.to_dict() for e in entries],
            "cap": self.store.cap,
            "can_summarize": any(e.is_dialogue for e in entries),
            "capture_available": self.capture.available,
            "speaking": self.player.speaking,
        }
