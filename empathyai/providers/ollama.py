from __future__ import annotations
from typing import Optional

import httpx

from empathyai.errors import ProviderError
from empathyai.providers.base import PromptBackend

DEFAULT_LOCAL_URL = "http://127.0.0.1:11434"
DEFAULT_LOCAL_MODEL = "gemma3:4b"


class OllamaBackend(PromptBackend):
    """Local Ollama backend (``POST /api/chat``)."""

    name = "ollama"

    def __init__(
        self,
        ollama_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        from empathyai.config import Config

        super().__init__(timeout=timeout or Config.LLM_TIMEOUT_SECONDS, client=client)
        self.ollama_url = (ollama_url or Config.OLLAMA_URL or DEFAULT_LOCAL_URL).rstrip("/")
        self.model = model or Config.OLLAMA_MODEL or DEFAULT_LOCAL_MODEL

    async def _complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "format": "json",
            "stream": False,
        }

        r = await self.client.post(f"{self.ollama_url}/api/chat", json=payload)
        r.raise_for_status()
        data = r.json()
        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            raise ProviderError("Ollama reply has no message object.", provider=self.name)

        return message.get("content") or ""
