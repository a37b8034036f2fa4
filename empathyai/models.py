"""Data models for the EmpathyAI session."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from empathyai.emotions import emotion_style


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    STATUS = "status"
    EMOTION_TAG = "emotion-tag"


DIALOGUE_SENDERS = (Sender.USER, Sender.ASSISTANT)
STYLED_SENDERS = (Sender.ASSISTANT, Sender.EMOTION_TAG)


class CaptureState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"


@dataclass(frozen=True)
class Entry:
    """One immutable line of the transcript."""
    id: str
    sender: Sender
    text: str
    timestamp: str  # ISO-8601, UTC
    emotion: Optional[str] = None
    confidence: Optional[float] = None  # clamped to [0, 1]

    @classmethod
    def create(
        cls,
        sender: Sender,
        text: str,
        emotion: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> "Entry":
        return cls(
            id=uuid.uuid4().hex,
            sender=Sender(sender),
            text=text,
            timestamp=datetime.now(timezone.utc).isoformat(),
            emotion=emotion,
            confidence=confidence,
        )

    @property
    def is_dialogue(self) -> bool:
        return self.sender in DIALOGUE_SENDERS

    def to_dict(self):
        return {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
            "timestamp": self.timestamp,
            "emotion": self.emotion,
            "confidence": self.confidence,
            # icon/color key for the avatar next to assistant and emotion lines
            "style": emotion_style(self.emotion) if self.sender in STYLED_SENDERS else None,
        }


@dataclass(frozen=True)
class DialogueMessage:
    """A user or assistant turn, as sent to the summarizer."""
    sender: Literal["user", "assistant"]
    text: str


@dataclass(frozen=True)
class EmotionResult:
    """Output of the emotion classifier."""
    emotion: str  # free-form English label, lower case
    confidence: float  # raw value reported by the model
