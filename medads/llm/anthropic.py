"""Anthropic Claude LLM provider implementation."""

import logging
from collections.abc import AsyncIterator
from typing import Any

import anthropic
from pydantic import BaseModel

from medads.llm.base import EmbeddingResult, LLMProvider, Message, ResponseResult

logger = logging.getLogger(__name__)


class AnthropicConfig(BaseModel):
    """Configuration for Anthropic provider."""

    api_key: str
    model: str = "claude-3-5-haiku-20241022"
    # Anthropic doesn't provide embeddings; see create_embedding_provider
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout: int = 30


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM provider implementation."""

    def __init__(self, config: AnthropicConfig | None = None, **kwargs: Any) -> None:
        """Initialize Anthropic provider.

        Args:
            config: Anthropic configuration
            **kwargs: Additional configuration options
        """
        self.config = config or AnthropicConfig(**kwargs)
        self.client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            timeout=self.config.timeout,
        )

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding - Anthropic doesn't provide embeddings.

        Raises:
            NotImplementedError: Anthropic doesn't provide embeddings
        """
        raise NotImplementedError(
            "Anthropic doesn't provide embeddings. Use OpenAI or Ollama for embeddings."
        )

    async def _create(
        self,
        messages: list[Message],
        system: str | None = None,
        temperature: float | None = None,
    ) -> ResponseResult:
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature if temperature is None else temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self.client.messages.create(**kwargs)

            # Anthropic returns content as a list of blocks
            content = ""
            for block in response.content:
                if block.type == "text":
                    content += block.text

            return ResponseResult(
                content=content,
                model=self.config.model,
                token_count=response.usage.output_tokens + response.usage.input_tokens,
                finish_reason=response.stop_reason,
            )

        except anthropic.AnthropicError as e:
            logger.error(f"Anthropic request failed: {e}")
            raise RuntimeError(f"Failed to generate response: {e}")

    async def generate_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> ResponseResult:
        """Generate response using Anthropic's Claude model.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Returns:
            ResponseResult with generated response
        """
        messages = [*(history or []), {"role": "user", "content": prompt}]
        return await self._create(messages)

    async def generate_structured(
        self,
        prompt: str,
        history: list[Message] | None = None,
        temperature: float = 0.1,
    ) -> ResponseResult:
        """Generate a JSON object with Claude.

        Claude has no JSON mode, so the instruction prompt goes in the system
        slot and the user turn asks for the bare JSON object.
        """
        messages = [
            *(history or []),
            {"role": "user", "content": "Respond with the JSON object only, no prose."},
        ]
        return await self._create(messages, system=prompt, temperature=temperature)

    async def stream_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> AsyncIterator[str]:
        """Stream a Claude response as text deltas."""
        messages = [*(history or []), {"role": "user", "content": prompt}]

        try:
            async with self.client.messages.stream(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=messages,
            ) as stream:
                async for text in stream.text_stream:
                    yield text

        except anthropic.AnthropicError as e:
            logger.error(f"Anthropic streaming failed: {e}")
            raise RuntimeError(f"Failed to stream response: {e}")

    async def health_check(self) -> bool:
        """Check if Anthropic service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            # Try a simple message to test connectivity
            await self.client.messages.create(
                model=self.config.model,
                max_tokens=10,
                messages=[{"role": "user", "content": "Hi"}],
            )
            return True
        except Exception as e:
            logger.warning(f"Anthropic health check failed: {e}")
            return False
