"""Exception taxonomy for the assistant session."""

from __future__ import annotations

from typing import Optional


class AssistantError(Exception):
    """Base class for all session errors."""


class EmptyInputError(AssistantError):
    """No text to process. Raised before any collaborator is contacted."""


class CaptureUnavailableError(AssistantError):
    """Speech capture is missing or was denied. Typed input still works."""


class ProviderError(AssistantError):
    """A language-model backend call failed (transport, HTTP or parse)."""

    def __init__(self, message: str, provider: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ClassificationError(AssistantError):
    """Emotion classification failed; the turn was aborted."""


class GenerationError(AssistantError):
    """Response generation failed; the turn was aborted."""


class NothingToSummarizeError(AssistantError):
    """The transcript holds no user or assistant entries."""


class SummarizeError(AssistantError):
    """The summarization call failed."""


class UnsupportedLanguageError(AssistantError, ValueError):
    """The requested response language is not offered."""
