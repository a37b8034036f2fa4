import asyncio

import pytest

from conftest import FailingClassifierBackend, FailingSummaryBackend
from empathyai.errors import (
    CaptureUnavailableError,
    ClassificationError,
    EmptyInputError,
    NothingToSummarizeError,
    SummarizeError,
    UnsupportedLanguageError,
)
from empathyai.models import CaptureState, Entry, Sender
from empathyai.providers.stub import StubBackend


class GatedBackend(StubBackend):
    """Classification waits until the test opens the gate."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def classify_emotion(self, text, language_hint=None):
        self.entered.set()
        await self.gate.wait()
        return await super().classify_emotion(text, language_hint)


@pytest.mark.asyncio
async def test_submit_text_runs_turn_and_returns_to_idle(controller):
    entries = await controller.submit_text("I just lost my job")

    assert [e.sender for e in entries] == [Sender.USER, Sender.EMOTION_TAG, Sender.ASSISTANT]
    assert controller.capture_state == CaptureState.IDLE
    assert controller.state.status_message == "Tap the microphone to talk"


@pytest.mark.asyncio
async def test_twenty_five_turns_on_cap_twenty(make_controller):
    controller = make_controller(StubBackend(), cap=20)
    first_entries = {}
    for i in range(1, 26):
        entries = await controller.submit_text(f"turn number {i}")
        first_entries[i] = entries[0]

    snapshot = controller.store.snapshot()
    assert len(snapshot) == 20
    # 25 turns * 3 entries = 75; the last 20 start at turn 19's emotion tag
    assert snapshot[0].sender == Sender.EMOTION_TAG
    assert snapshot[2] is first_entries[20]
    assert snapshot[-3] is first_entries[25]
    assert first_entries[1] not in snapshot


def test_twenty_five_single_entry_turns(store):
    # with one entry per turn the first retained entry is the 6th turn's
    users = []
    for i in range(1, 26):
        store.append(Entry.create(Sender.USER, f"turn {i}"))
        users.append(store.snapshot()[-1])
    snapshot = store.snapshot()
    assert len(snapshot) == 20
    assert snapshot[0] is users[5]


@pytest.mark.asyncio
async def test_start_capture_requires_available_source(controller, capture, bus):
    capture.set_available(False)

    with pytest.raises(CaptureUnavailableError):
        controller.start_capture()

    assert controller.capture_state == CaptureState.IDLE
    assert bus.of_type("capture.start") == []
    assert bus.of_type("notify")[-1].data["title"] == "Microphone Access"
    # typed input still works
    assert await controller.submit_text("hello") is not None


@pytest.mark.asyncio
async def test_voice_turn_flow(controller, capture, bus):
    assert controller.start_capture() is True
    assert controller.capture_state == CaptureState.LISTENING
    assert bus.of_type("capture.start")[-1].data == {
        "lang": "en-US",
        "continuous": False,
        "interim_results": True,
    }

    await capture.deliver_result("I just lost", False)
    assert controller.state.status_message == "Listening... I just lost"
    assert len(controller.store) == 0

    await capture.deliver_result("I just lost my job", True)
    assert controller.capture_state == CaptureState.IDLE
    assert [e.sender for e in controller.store.snapshot()] == [
        Sender.USER,
        Sender.EMOTION_TAG,
        Sender.ASSISTANT,
    ]


@pytest.mark.asyncio
async def test_start_capture_rejected_while_listening(controller, bus):
    controller.start_capture()
    assert controller.start_capture() is False
    assert len(bus.of_type("capture.start")) == 1


@pytest.mark.asyncio
async def test_submit_rejected_while_listening(controller, stub_backend):
    controller.start_capture()
    assert await controller.submit_text("hello") is None
    assert stub_backend.call_count == 0
    assert controller.capture_state == CaptureState.LISTENING


@pytest.mark.asyncio
async def test_requests_rejected_while_processing(make_controller):
    backend = GatedBackend()
    controller = make_controller(backend)

    turn = asyncio.create_task(controller.submit_text("first"))
    await backend.entered.wait()
    assert controller.capture_state == CaptureState.PROCESSING

    assert controller.start_capture() is False
    assert await controller.submit_text("second") is None
    assert await controller.summarize() is None
    assert controller.set_language("hi-IN") is False

    backend.gate.set()
    entries = await turn
    assert entries[0].text == "first"
    assert controller.capture_state == CaptureState.IDLE
    assert [e.text for e in controller.store.snapshot() if e.sender == Sender.USER] == ["first"]


@pytest.mark.asyncio
async def test_capture_error_returns_to_idle(controller, capture, stub_backend, bus):
    controller.start_capture()

    await capture.deliver_error("not-allowed")

    assert controller.capture_state == CaptureState.IDLE
    assert stub_backend.call_count == 0
    last = controller.store.snapshot()[-1]
    assert last.sender == Sender.STATUS
    assert last.text == "Error: Microphone access denied. Please enable microphone permissions."
    assert bus.of_type("notify")[-1].data["title"] == "Speech Recognition Error"


@pytest.mark.asyncio
async def test_capture_end_without_result(controller, capture):
    controller.start_capture()
    await capture.deliver_end()
    assert controller.capture_state == CaptureState.IDLE
    assert len(controller.store) == 0


@pytest.mark.asyncio
async def test_stop_capture_ignores_late_results(controller, capture, bus, stub_backend):
    controller.start_capture()
    assert controller.stop_capture() is True
    assert bus.of_type("capture.stop")

    await capture.deliver_result("too late", True)

    assert stub_backend.call_count == 0
    assert controller.capture_state == CaptureState.IDLE


@pytest.mark.asyncio
async def test_empty_voice_transcript(controller, capture, stub_backend):
    controller.start_capture()

    with pytest.raises(EmptyInputError):
        await capture.deliver_result("   ", True)

    assert stub_backend.call_count == 0
    assert controller.capture_state == CaptureState.IDLE
    assert controller.store.snapshot()[-1].text == "No speech detected. Tap to try again."


@pytest.mark.asyncio
async def test_classification_failure_returns_to_idle(make_controller, bus):
    controller = make_controller(FailingClassifierBackend())

    with pytest.raises(ClassificationError):
        await controller.submit_text("I feel awful")

    senders = [e.sender for e in controller.store.snapshot()]
    assert Sender.USER in senders
    assert Sender.ASSISTANT not in senders
    assert controller.capture_state == CaptureState.IDLE
    assert bus.of_type("notify")[-1].data["title"] == "AI Error"
    assert bus.of_type("speech.speak") == []


@pytest.mark.asyncio
async def test_summary_is_invalidated_by_new_entry(controller):
    await controller.submit_text("I just lost my job")
    summary = await controller.summarize()

    assert summary
    assert controller.last_summary == summary
    assert controller.view()["state"]["last_summary"] == summary

    await controller.submit_text("thanks for listening")
    assert controller.last_summary is None
    assert controller.state.last_summary is None


@pytest.mark.asyncio
async def test_summarize_status_only(controller, stub_backend, capture):
    capture.set_available(False)
    with pytest.raises(CaptureUnavailableError):
        controller.start_capture()

    with pytest.raises(NothingToSummarizeError):
        await controller.summarize()

    assert stub_backend.call_count == 0
    assert controller.capture_state == CaptureState.IDLE


@pytest.mark.asyncio
async def test_summarize_failure_keeps_valid_summary(make_controller):
    backend = StubBackend()
    controller = make_controller(backend)
    await controller.submit_text("hello there")
    first = await controller.summarize()

    # same transcript, failing backend
    controller.summarizer.backend = FailingSummaryBackend()
    with pytest.raises(SummarizeError):
        await controller.summarize()

    assert controller.last_summary == first
    assert controller.capture_state == CaptureState.IDLE


@pytest.mark.asyncio
async def test_audio_toggle(controller, bus):
    controller.set_audio_enabled(False)
    await controller.submit_text("hello")
    assert bus.of_type("speech.speak") == []

    controller.set_audio_enabled(True)
    await controller.submit_text("hello again")
    assert len(bus.of_type("speech.speak")) == 1
    assert controller.player.speaking

    controller.set_audio_enabled(False)
    assert not controller.player.speaking
    assert bus.of_type("speech.cancel")


@pytest.mark.asyncio
async def test_language_selection(controller, bus):
    assert controller.set_language("te-in") is True
    assert controller.state.language == "te-IN"

    with pytest.raises(UnsupportedLanguageError):
        controller.set_language("xx-YY")

    controller.start_capture()
    assert bus.of_type("capture.start")[-1].data["lang"] == "te-IN"
