from dataclasses import dataclass
from typing import Optional

from empathyai.models import CaptureState

IDLE_STATUS = "Tap the microphone to talk"


@dataclass
class SessionState:
    capture_state: CaptureState = CaptureState.IDLE
    language: str = "en-US"
    audio_enabled: bool = True
    last_summary: Optional[str] = None
    summary_revision: Optional[int] = None  # transcript revision the summary describes
    status_message: str = IDLE_STATUS

    def invalidate_summary(self) -> bool:
        had_summary = self.last_summary is not None
        self.last_summary = None
        self.summary_revision = None
        return had_summary

    def to_dict(self):
        return {
            "capture_state": self.capture_state.value,
            "language": self.language,
            "audio_enabled": self.audio_enabled,
            "last_summary": self.last_summary,
            "status_message": self.status_message,
        }
