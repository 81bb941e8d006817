"""Factory for creating LLM providers from configuration."""

from medads.config import LLMProvider as LLMProviderEnum
from medads.config import Settings, get_settings
from medads.llm.base import LLMProvider, LLMProviderFactory


def create_llm_provider(
    provider_name: str | None = None,
    settings: Settings | None = None,
) -> LLMProvider:
    """Create LLM provider from configuration.

    Args:
        provider_name: Override provider name, defaults to settings.llm_provider
        settings: Settings to build from, defaults to the global settings

    Returns:
        Configured LLM provider instance

    Raises:
        ValueError: If provider configuration is invalid
    """
    settings = settings or get_settings()
    provider_name = provider_name or settings.llm_provider

    # Build provider-specific config
    if provider_name == LLMProviderEnum.OLLAMA:
        from medads.llm.ollama import OllamaConfig

        config = OllamaConfig(
            host=settings.ollama_host,
            model=settings.ollama_model,
            embedding_model=settings.ollama_embedding_model,
            timeout=settings.api_timeout_seconds,
        )
        return LLMProviderFactory.create("ollama", config=config)

    elif provider_name == LLMProviderEnum.OPENAI:
        from medads.llm.openai import OpenAIConfig

        if not settings.openai_api_key:
            raise ValueError("OpenAI API key is required")

        config = OpenAIConfig(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            embedding_model=settings.openai_embedding_model,
            timeout=settings.api_timeout_seconds,
        )
        return LLMProviderFactory.create("openai", config=config)

    elif provider_name == LLMProviderEnum.GEMINI:
        from medads.llm.gemini import GeminiConfig

        if not settings.gemini_api_key:
            raise ValueError("Gemini API key is required")

        config = GeminiConfig(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.api_timeout_seconds,
        )
        return LLMProviderFactory.create("gemini", config=config)

    elif provider_name == LLMProviderEnum.ANTHROPIC:
        from medads.llm.anthropic import AnthropicConfig

        if not settings.anthropic_api_key:
            raise ValueError("Anthropic API key is required")

        config = AnthropicConfig(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            timeout=settings.api_timeout_seconds,
        )
        return LLMProviderFactory.create("anthropic", config=config)

    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")


def create_embedding_provider(
    provider_name: str | None = None,
    settings: Settings | None = None,
) -> LLMProvider:
    """Create LLM provider specifically for embeddings.

    Note: Anthropic doesn't provide embeddings, so this will fallback to OpenAI
    or Ollama for embeddings even if Anthropic is selected for responses.

    Args:
        provider_name: Override provider name, defaults to settings.llm_provider
        settings: Settings to build from, defaults to the global settings

    Returns:
        Configured LLM provider instance suitable for embeddings
    """
    settings = settings or get_settings()
    provider_name = provider_name or settings.llm_provider

    # If using Anthropic, fallback to OpenAI or Ollama for embeddings
    if provider_name == LLMProviderEnum.ANTHROPIC:
        if settings.openai_api_key:
            return create_llm_provider(LLMProviderEnum.OPENAI, settings)
        else:
            return create_llm_provider(LLMProviderEnum.OLLAMA, settings)

    # For other providers, use the same provider for embeddings
    return create_llm_provider(provider_name, settings)
