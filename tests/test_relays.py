import pytest

from empathyai.capture import capture_error_message
from empathyai.playback import BrowserSpeechPlayer


@pytest.mark.parametrize(
    "code, message",
    [
        ("no-speech", "No speech detected. Please try again."),
        ("audio-capture", "Audio capture error. Check your microphone."),
        ("not-allowed", "Microphone access denied. Please enable microphone permissions."),
        ("network", "An error occurred during speech recognition."),
    ],
)
def test_capture_error_messages(code, message):
    assert capture_error_message(code) == message


def test_new_utterance_cancels_previous(bus):
    player = BrowserSpeechPlayer(bus)

    first = player.speak("one", "en-US")
    second = player.speak("two", "hi-IN")

    types = [e.type for e in bus.history]
    assert types == ["speech.speak", "speech.cancel", "speech.speak"]
    assert bus.history[1].data["utterance_id"] == first
    assert player.current == second


def test_finished_clears_only_current(bus):
    player = BrowserSpeechPlayer(bus)
    first = player.speak("one", "en-US")
    second = player.speak("two", "en-US")

    player.finished(first)
    assert player.speaking
    player.finished(second)
    assert not player.speaking
    # nothing left to cancel
    player.cancel()
    assert [e.type for e in bus.history].count("speech.cancel") == 1


def test_unavailable_player_is_silent(bus):
    player = BrowserSpeechPlayer(bus, available=False)
    assert player.speak("hello", "en-US") is None
    assert bus.history == []
    assert not player.speaking


@pytest.mark.asyncio
async def test_event_bus_fan_out_and_lag(bus):
    slow = bus.subscribe()
    fast = bus.subscribe()
    bus.publish("status", message="a")
    assert (await fast.get()).data == {"message": "a"}

    bus.unsubscribe(fast)
    assert bus.subscriber_count == 1
    for i in range(300):
        bus.publish("status", message=str(i))
    assert slow.qsize() == 256
    assert len(bus.history) == 100
