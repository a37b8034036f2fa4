"""Emotion labels, display styles and confidence handling.

The classifier returns an open-vocabulary English label. The labels the
response prompt tailors its empathy to (plus ``neutral``) have a canonical
name and a display style; anything else is kept as-is and shown with the
default style.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

DEFAULT_STYLE = "brain"
NO_EMOTION_STYLE = "bot"

# alias -> canonical label
_ALIASES: Dict[str, str] = {
    "joy": "joy",
    "happy": "joy",
    "happiness": "joy",
    "sadness": "sadness",
    "sad": "sadness",
    "anger": "anger",
    "angry": "anger",
    "anxiety": "anxiety",
    "anxious": "anxiety",
    "loneliness": "loneliness",
    "lonely": "loneliness",
    "neutral": "neutral",
}

# canonical label -> (icon, color)
STYLES: Dict[str, tuple[str, str]] = {
    "joy": ("smile", "yellow"),
    "sadness": ("frown", "blue"),
    "anger": ("angry", "red"),
    "anxiety": ("alert-circle", "orange"),
    "loneliness": ("bot", "purple"),
    "neutral": ("info", "gray"),
}


def normalize_label(label: Any) -> str:
    """Lower-cased, trimmed label; empty input becomes ``neutral``."""
    value = str(label or "").strip().lower()
    return value or "neutral"


def canonical_emotion(label: Optional[str]) -> Optional[str]:
    """Canonical name for a known label, ``None`` for open-vocabulary ones."""
    if not label:
        return None
    return _ALIASES.get(label.strip().lower())


def emotion_style(label: Optional[str]) -> Dict[str, str]:
    if not label:
        return {"icon": NO_EMOTION_STYLE, "color": "primary"}
    canonical = canonical_emotion(label)
    if canonical is None:
        return {"icon": DEFAULT_STYLE, "color": "gray"}
    icon, color = STYLES[canonical]
    return {"icon": icon, "color": color}


def clamp_confidence(value: Any) -> float:
    """Clamp to [0, 1]. Non-numeric values count as no confidence."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return min(max(number, 0.0), 1.0)


def describe(emotion: str, confidence: float) -> str:
    pct = round(clamp_confidence(confidence) * 100)
    return f"Detected Emotion: {emotion} (Confidence: {pct}%)"
