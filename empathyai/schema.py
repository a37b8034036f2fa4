from __future__ import annotations
from typing import Any, Dict
import json

from empathyai.emotions import normalize_label
from empathyai.models import EmotionResult


def try_parse_json(text: str, fallback_key: str) -> Dict[str, Any]:
    """
    Best-effort JSON extraction (handles occasional extra text around JSON).
    When no object can be found the raw text becomes ``fallback_key``.
    """
    if text is None:
        raise ValueError("Empty response")
    s = text.strip()
    if s.startswith("```"):
        s = s.strip("`")
        if s.lower().startswith("json"):
            s = s[4:]
        s = s.strip()

    # direct JSON
    if s.startswith("{") and s.endswith("}"):
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            pass

    # try to extract first {...last}
    start = s.find("{")
    end = s.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            obj = json.loads(s[start:end+1])
            if isinstance(obj, dict):
                return obj
        except json.JSONDecodeError:
            pass

    return {fallback_key: s}


def _single_paragraph(value: Any) -> str:
    return " ".join(str(value or "").split())


def normalize_emotion_output(obj: Dict[str, Any]) -> EmotionResult:
    """
    Stable emotion result regardless of provider formatting.
    Confidence is passed through untouched when numeric; clamping is a display concern.
    """
    label = obj.get("emotion", "")
    # raw-text fallback: the first word is the label
    if "emotion" not in obj and obj.get("text"):
        words = str(obj["text"]).split()
        label = words[0].strip(".,;:!\"'") if words else ""
    confidence = obj.get("confidence", 0.0)
    try:
        confidence = float(confidence)
    except (TypeError, ValueError):
        confidence = 0.0
    return EmotionResult(emotion=normalize_label(label), confidence=confidence)


def normalize_response_output(obj: Dict[str, Any]) -> str:
    text = _single_paragraph(obj.get("response") or obj.get("text"))
    if not text:
        raise ValueError("Model returned an empty response")
    return text


def normalize_summary_output(obj: Dict[str, Any]) -> str:
    text = _single_paragraph(obj.get("summary") or obj.get("text"))
    if not text:
        raise ValueError("Model returned an empty summary")
    return text
