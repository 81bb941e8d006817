"""OpenAI LLM provider implementation."""

import logging
from collections.abc import AsyncIterator
from typing import Any

import openai
from pydantic import BaseModel

from medads.llm.base import EmbeddingResult, LLMProvider, Message, ResponseResult

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for OpenAI provider."""

    api_key: str
    model: str = "gpt-4o"
    embedding_model: str = "text-embedding-3-small"
    max_tokens: int = 1000
    structured_max_tokens: int = 800
    temperature: float = 0.7
    timeout: int = 30
    max_retries: int = 3


class OpenAIProvider(LLMProvider):
    """OpenAI LLM provider implementation."""

    def __init__(self, config: OpenAIConfig | None = None, **kwargs: Any) -> None:
        """Initialize OpenAI provider.

        Args:
            config: OpenAI configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OpenAIConfig(**kwargs)
        self.client = openai.AsyncOpenAI(
            api_key=self.config.api_key,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding using OpenAI's embedding model.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector
        """
        try:
            response = await self.client.embeddings.create(
                model=self.config.embedding_model,
                input=text,
            )

            embedding_data = response.data[0]

            return EmbeddingResult(
                embedding=embedding_data.embedding,
                model=self.config.embedding_model,
                token_count=response.usage.total_tokens,
            )

        except openai.OpenAIError as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise RuntimeError(f"Failed to generate embedding: {e}")

    def _build_messages(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> list[Message]:
        return [*(history or []), {"role": "user", "content": prompt}]

    async def generate_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> ResponseResult:
        """Generate response using OpenAI's chat model.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Returns:
            ResponseResult with generated response
        """
        messages = self._build_messages(prompt, history)

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )

            choice = response.choices[0]

            return ResponseResult(
                content=choice.message.content or "",
                model=self.config.model,
                token_count=response.usage.total_tokens if response.usage else None,
                finish_reason=choice.finish_reason,
            )

        except openai.OpenAIError as e:
            logger.error(f"OpenAI response request failed: {e}")
            raise RuntimeError(f"Failed to generate response: {e}")

    async def generate_structured(
        self,
        prompt: str,
        history: list[Message] | None = None,
        temperature: float = 0.1,
    ) -> ResponseResult:
        """Generate a JSON object using OpenAI's JSON response format.

        Args:
            prompt: Instruction prompt describing the expected JSON structure
            history: Optional prior conversation turns
            temperature: Sampling temperature

        Returns:
            ResponseResult whose content is a JSON document
        """
        messages: list[Message] = [*(history or []), {"role": "system", "content": prompt}]

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                max_tokens=self.config.structured_max_tokens,
                temperature=temperature,
                response_format={"type": "json_object"},
            )

            choice = response.choices[0]

            return ResponseResult(
                content=choice.message.content or "",
                model=self.config.model,
                token_count=response.usage.total_tokens if response.usage else None,
                finish_reason=choice.finish_reason,
            )

        except openai.OpenAIError as e:
            logger.error(f"OpenAI structured request failed: {e}")
            raise RuntimeError(f"Failed to generate structured response: {e}")

    async def stream_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> AsyncIterator[str]:
        """Stream a chat completion as text deltas.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Yields:
            Text deltas in generation order
        """
        messages = self._build_messages(prompt, history=history)

        try:
            stream = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content or ""
                if delta:
                    yield delta

        except openai.OpenAIError as e:
            logger.error(f"OpenAI streaming request failed: {e}")
            raise RuntimeError(f"Failed to stream response: {e}")

    async def health_check(self) -> bool:
        """Check if OpenAI service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            # Try a simple embedding request to test connectivity
            await self.client.embeddings.create(
                model=self.config.embedding_model,
                input="health check",
            )
            return True
        except Exception as e:
            logger.warning(f"OpenAI health check failed: {e}")
            return False
