"""Base LLM provider interface and factory pattern."""

import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel

Message = dict[str, str]


class EmbeddingResult(BaseModel):
    """Result from embedding generation."""

    embedding: list[float]
    model: str
    token_count: int | None = None
    success: bool = True
    error: str | None = None


class ResponseResult(BaseModel):
    """Result from response generation."""

    content: str
    model: str
    token_count: int | None = None
    finish_reason: str | None = None
    success: bool = True
    error: str | None = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding for the given text.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector and metadata
        """
        pass

    @abstractmethod
    async def generate_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> ResponseResult:
        """Generate a response to a prompt, continuing any conversation history.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns ({"role", "content"})

        Returns:
            ResponseResult with generated response and metadata
        """
        pass

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        history: list[Message] | None = None,
        temperature: float = 0.1,
    ) -> ResponseResult:
        """Generate a JSON object response for the given instruction prompt.

        Implementations should request the provider's JSON output mode where
        one exists. The content is not validated here; callers parse it with
        ``parse_json_object`` and validate the shape themselves.

        Args:
            prompt: Instruction prompt describing the expected JSON structure
            history: Optional prior conversation turns
            temperature: Sampling temperature

        Returns:
            ResponseResult whose content is expected to be a JSON object
        """
        pass

    async def stream_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> AsyncIterator[str]:
        """Stream a response as text deltas.

        Providers without native streaming yield the whole response once.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Yields:
            Text deltas in generation order
        """
        result = await self.generate_response(prompt, history=history)
        if result.content:
            yield result.content

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is healthy and accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass


def parse_json_object(content: str | None) -> dict[str, Any]:
    """Parse a structured-output response into a JSON object.

    Tolerates a fenced ```json block around the payload, which some
    providers emit even in JSON mode.

    Args:
        content: Raw response content

    Returns:
        Parsed JSON object

    Raises:
        ValueError: If the content is empty, not JSON, or not a JSON object
    """
    if not content or not content.strip():
        raise ValueError("Empty response from LLM provider")

    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in LLM response: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return data


class LLMProviderFactory:
    """Factory for creating LLM providers."""

    _providers: dict[str, type[LLMProvider]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[LLMProvider]) -> None:
        """Register a provider class.

        Args:
            name: Provider name (e.g., "ollama", "openai")
            provider_class: Provider class to register
        """
        cls._providers[name] = provider_class

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> LLMProvider:
        """Create a provider instance.

        Args:
            name: Provider name
            **kwargs: Provider-specific configuration

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider name is not registered
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise ValueError(f"Unknown provider '{name}'. Available: {available}")

        return cls._providers[name](**kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List all registered provider names.

        Returns:
            List of provider names
        """
        return list(cls._providers.keys())
