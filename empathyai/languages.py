"""Response languages offered to the user (BCP-47 codes)."""

from __future__ import annotations

from typing import Dict, List

from empathyai.errors import UnsupportedLanguageError

SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en-US": "English",
    "hi-IN": "हिन्दी (Hindi)",
    "kn-IN": "ಕನ್ನಡ (Kannada)",
    "te-IN": "తెలుగు (Telugu)",
    "ta-IN": "தமிழ் (Tamil)",
    "es-ES": "Español",
    "fr-FR": "Français",
}


def list_languages() -> List[Dict[str, str]]:
    return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES.items()]


def resolve_language(code: str) -> str:
    """Return the canonical spelling of ``code`` or raise."""
    wanted = (code or "").strip().replace("_", "-").lower()
    for known in SUPPORTED_LANGUAGES:
        if known.lower() == wanted:
            return known
    raise UnsupportedLanguageError(
        f"Unsupported language '{code}'. Valid: {', '.join(SUPPORTED_LANGUAGES)}"
    )
