"""Abstract base classes for language-model backends."""

from abc import ABC, abstractmethod
import logging
from typing import Optional, Sequence

import httpx

from empathyai.errors import ProviderError
from empathyai.models import DialogueMessage, EmotionResult
from empathyai.prompt import build_emotion_prompt, build_response_prompt, build_summary_prompt
from empathyai.schema import (
    normalize_emotion_output,
    normalize_response_output,
    normalize_summary_output,
    try_parse_json,
)

logger = logging.getLogger(__name__)


class AssistantBackend(ABC):
    """Classifier, generator and summarizer behind one interface."""

    name: str = "base"

    @abstractmethod
    async def classify_emotion(self, text: str, language_hint: Optional[str] = None) -> EmotionResult:
        """Classify the predominant emotion of ``text``.

        Args:
            text: The user's statement
            language_hint: BCP-47 code of the statement, if known

        Returns:
            EmotionResult with an English label and the model's confidence
        """
        pass

    @abstractmethod
    async def generate_response(self, user_text: str, emotion: str, language_code: str) -> str:
        """Generate an empathetic single-paragraph reply in ``language_code``.

        Args:
            user_text: The user's statement
            emotion: Detected emotion (English term)
            language_code: BCP-47 code of the reply language

        Returns:
            Reply text
        """
        pass

    @abstractmethod
    async def summarize_dialogue(self, messages: Sequence[DialogueMessage]) -> str:
        """Summarize user/assistant messages. ``messages`` must not be empty."""
        pass

    async def aclose(self) -> None:
        """Release network resources, if any."""
        return None


class PromptBackend(AssistantBackend):
    """Backend that renders the shared prompts and parses JSON replies.

    Subclasses only implement ``_complete`` (prompt in, raw text out).
    """

    def __init__(self, timeout: float = 90.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """Send one prompt and return the raw model text."""
        pass

    async def _call(self, prompt: str) -> str:
        try:
            text = await self._complete(prompt)
        except ProviderError:
            raise
        except httpx.HTTPStatusError as e:
            message = describe_http_error(self.name, e.response.status_code, str(e))
            logger.warning("%s API error: %s", self.name, e)
            raise ProviderError(message, provider=self.name, status_code=e.response.status_code) from e
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out: %s", self.name, e)
            raise ProviderError(f"{self.name} request timed out.", provider=self.name) from e
        except httpx.HTTPError as e:
            logger.warning("%s connection error: %s", self.name, e)
            raise ProviderError(
                "Network connection failed. Please check your connection and try again.",
                provider=self.name,
            ) from e
        except ValueError as e:
            # malformed JSON body from the backend
            raise ProviderError(f"{self.name} returned an unreadable reply.", provider=self.name) from e

        if not (text or "").strip():
            raise ProviderError(f"{self.name} returned an empty response.", provider=self.name)
        return text

    async def classify_emotion(self, text: str, language_hint: Optional[str] = None) -> EmotionResult:
        raw = await self._call(build_emotion_prompt(text, language_hint))
        obj = try_parse_json(raw, "text")
        if not isinstance(obj, dict):
            raise ProviderError(f"{self.name} returned a non-object emotion reply.", provider=self.name)
        try:
            return normalize_emotion_output(obj)
        except ValueError as e:
            raise ProviderError(str(e), provider=self.name) from e

    async def generate_response(self, user_text: str, emotion: str, language_code: str) -> str:
        raw = await self._call(build_response_prompt(user_text, emotion, language_code))
        try:
            return normalize_response_output(try_parse_json(raw, "text"))
        except ValueError as e:
            raise ProviderError(str(e), provider=self.name) from e

    async def summarize_dialogue(self, messages: Sequence[DialogueMessage]) -> str:
        if not messages:
            raise ValueError("Cannot summarize an empty conversation.")
        raw = await self._call(build_summary_prompt(messages))
        try:
            return normalize_summary_output(try_parse_json(raw, "text"))
        except ValueError as e:
            raise ProviderError(str(e), provider=self.name) from e


def describe_http_error(provider: str, status_code: int, detail: str) -> str:
    """Friendly description of an HTTP failure from a model backend."""
    if status_code in (401, 403):
        return f"Invalid or missing API key for {provider}. Please check your settings."
    if status_code == 429:
        return "Rate limit exceeded. Please wait a moment and try again."
    if status_code == 404:
        return f"Model not found on {provider}. Please check the configured model name."
    return f"HTTP Error {status_code}: {detail}"
