from __future__ import annotations
from typing import Any, Dict, Optional

import httpx

from empathyai.errors import ProviderError
from empathyai.providers.base import PromptBackend

# Gemini Developer API (AI Studio) REST base
DEFAULT_GEMINI_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"  # safe default; override in env


class GeminiBackend(PromptBackend):
    """Gemini Developer API ``generateContent`` backend."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        from empathyai.config import Config

        super().__init__(timeout=timeout or Config.LLM_TIMEOUT_SECONDS, client=client)
        self.api_key = (api_key or Config.GEMINI_API_KEY or "").strip()
        self.model_name = (model or Config.GEMINI_MODEL or DEFAULT_GEMINI_MODEL).strip()
        self.base_url = (base_url or Config.GEMINI_BASE_URL or DEFAULT_GEMINI_BASE).rstrip("/")

        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY is required. Please set it in your .env file or environment variables. "
                "Get your API key from: https://aistudio.google.com/app/apikey"
            )

    async def _complete(self, prompt: str) -> str:
        # Gemini REST: POST /v1beta/models/{model}:generateContent
        url = f"{self.base_url}/v1beta/models/{self.model_name}:generateContent"

        body = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
            "generationConfig": {
                "temperature": 0.7,
                "topP": 0.95,
                "maxOutputTokens": 1024,
                "responseMimeType": "application/json",
            },
        }

        headers = {
            "Content-Type": "application/json",
            # Recommended auth header for Gemini Developer API
            "x-goog-api-key": self.api_key,
        }

        r = await self.client.post(url, json=body, headers=headers)
        r.raise_for_status()
        return extract_text(r.json())


def extract_text(data: Dict[str, Any]) -> str:
    if not isinstance(data, dict):
        raise ProviderError("Gemini reply is not a JSON object.", provider="gemini")
    candidates = data.get("candidates") or []
    if not candidates:
        reason = (data.get("promptFeedback") or {}).get("blockReason")
        if reason:
            raise ProviderError(
                f"The prompt was blocked by safety filters ({reason}).", provider="gemini"
            )
        raise ProviderError("Gemini returned no candidates.", provider="gemini")

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    parts = ((first.get("content") or {}).get("parts") or [])
    text = "".join([p.get("text", "") for p in parts if isinstance(p, dict)])
    if not text.strip():
        raise ProviderError("Gemini returned an empty response.", provider="gemini")
    return text
