"""LLM providers module."""

from medads.llm.anthropic import AnthropicConfig, AnthropicProvider
from medads.llm.base import (
    EmbeddingResult,
    LLMProvider,
    LLMProviderFactory,
    Message,
    ResponseResult,
    parse_json_object,
)
from medads.llm.factory import create_embedding_provider, create_llm_provider
from medads.llm.gemini import GeminiConfig, GeminiProvider
from medads.llm.ollama import OllamaConfig, OllamaProvider
from medads.llm.openai import OpenAIConfig, OpenAIProvider

# Register all providers
LLMProviderFactory.register("ollama", OllamaProvider)
LLMProviderFactory.register("openai", OpenAIProvider)
LLMProviderFactory.register("gemini", GeminiProvider)
LLMProviderFactory.register("anthropic", AnthropicProvider)

__all__ = [
    "AnthropicConfig",
    "AnthropicProvider",
    "EmbeddingResult",
    "GeminiConfig",
    "GeminiProvider",
    "LLMProvider",
    "LLMProviderFactory",
    "Message",
    "OllamaConfig",
    "OllamaProvider",
    "OpenAIConfig",
    "OpenAIProvider",
    "ResponseResult",
    "create_embedding_provider",
    "create_llm_provider",
    "parse_json_object",
]
