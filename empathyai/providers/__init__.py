"""Backend factory for creating different language-model backends."""

from empathyai.providers.base import AssistantBackend, PromptBackend


def create_backend(provider: str = "gemini", **kwargs) -> AssistantBackend:
    """Factory function to create a backend instance based on type.

    Args:
        provider: Type of backend to create ("gemini", "ollama" or "stub")
        **kwargs: Passed to the backend constructor

    Returns:
        AssistantBackend instance

    Raises:
        ValueError: If provider is not supported
    """
    provider = (provider or "").strip().lower()

    if provider == "gemini":
        from empathyai.providers.gemini import GeminiBackend
        return GeminiBackend(**kwargs)
    elif provider == "ollama":
        from empathyai.providers.ollama import OllamaBackend
        return OllamaBackend(**kwargs)
    elif provider == "stub":
        from empathyai.providers.stub import StubBackend
        return StubBackend(**kwargs)
    else:
        raise ValueError(
            f"Unsupported provider: '{provider}'. "
            f"Supported providers are: 'gemini', 'ollama', 'stub'"
        )


__all__ = ["create_backend", "AssistantBackend", "PromptBackend"]
