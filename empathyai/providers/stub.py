"""
Deterministic backend for tests and offline demos.

Uses keyword matching instead of a model, so every call is reproducible and
nothing touches the network.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from empathyai.models import DialogueMessage, EmotionResult
from empathyai.providers.base import AssistantBackend

# (pattern, emotion, confidence); first match wins
EMOTION_PATTERNS: List[Tuple[str, str, float]] = [
    (r"\b(lost|miss|sad|cry|crying|died|passed away|grief|alone)\b", "sadness", 0.82),
    (r"\b(angry|furious|hate|annoyed|unfair)\b", "anger", 0.78),
    (r"\b(worried|nervous|scared|afraid|anxious|panic)\b", "anxiety", 0.75),
    (r"\b(lonely|nobody|no one)\b", "loneliness", 0.7),
    (r"\b(happy|great|wonderful|excited|love|glad)\b", "joy", 0.88),
]

OPENINGS: Dict[str, str] = {
    "sadness": "I'm so sorry you're feeling sad.",
    "anger": "I can hear that you're feeling angry.",
    "anxiety": "It sounds like you're feeling anxious.",
    "loneliness": "I'm sorry you're feeling lonely.",
    "joy": "I'm so happy to hear your joy!",
    "neutral": "Thank you for sharing that.",
}

CLOSINGS: Dict[str, str] = {
    "sadness": "Please be gentle with yourself, I'm here to listen. 💙",
    "anger": "Let's take a slow breath together, things can get better. 🌿",
    "anxiety": "Try to focus on one small step at a time, you're not alone. 🌼",
    "loneliness": "I'm right here with you, and I'm glad you reached out. 🤝",
    "joy": "That's wonderful, thank you for sharing it with me. 😊",
    "neutral": "Let me know if there's anything else I can help with. 🙂",
}


class StubBackend(AssistantBackend):
    """Keyword-rule backend that records every call."""

    name = "stub"

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    async def classify_emotion(self, text: str, language_hint: Optional[str] = None) -> EmotionResult:
        self.calls.append(("classify", (text, language_hint)))
        for pattern, emotion, confidence in EMOTION_PATTERNS:
            if re.search(pattern, text, re.IGNORECASE):
                return EmotionResult(emotion=emotion, confidence=confidence)
        return EmotionResult(emotion="neutral", confidence=0.6)

    async def generate_response(self, user_text: str, emotion: str, language_code: str) -> str:
        self.calls.append(("generate", (user_text, emotion, language_code)))
        key = emotion if emotion in OPENINGS else "neutral"
        statement = " ".join(user_text.split()).rstrip(".!?")
        reply = f'{OPENINGS[key]} You mentioned "{statement}". {CLOSINGS[key]}'
        if not language_code.lower().startswith("en"):
            reply = f"[{language_code}] {reply}"
        return reply

    async def summarize_dialogue(self, messages: Sequence[DialogueMessage]) -> str:
        if not messages:
            raise ValueError("Cannot summarize an empty conversation.")
        self.calls.append(("summarize", tuple(messages)))
        user_turns = [m.text for m in messages if m.sender == "user"]
        topics = "; ".join(user_turns[-3:]) if user_turns else "assistant remarks only"
        return (
            f"The conversation had {len(user_turns)} user message(s) and "
            f"{len(messages) - len(user_turns)} assistant reply(ies). Topics: {topics}."
        )
