"""Ollama LLM provider implementation."""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import BaseModel

from medads.llm.base import EmbeddingResult, LLMProvider, Message, ResponseResult

logger = logging.getLogger(__name__)


class OllamaConfig(BaseModel):
    """Configuration for Ollama provider."""

    host: str = "http://localhost:11434"
    model: str = "llama3.2"
    embedding_model: str = "nomic-embed-text"
    timeout: int = 30
    generate_timeout: float = 180.0


class OllamaProvider(LLMProvider):
    """Ollama LLM provider implementation."""

    def __init__(self, config: OllamaConfig | None = None, **kwargs: Any) -> None:
        """Initialize Ollama provider.

        Args:
            config: Ollama configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OllamaConfig(**kwargs)
        self.client = httpx.AsyncClient(
            base_url=self.config.host,
            timeout=self.config.timeout,
        )

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding using Ollama's embedding model.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector
        """
        try:
            response = await self.client.post(
                "/api/embed",
                json={
                    "model": self.config.embedding_model,
                    "input": text,
                },
            )
            response.raise_for_status()
            data = response.json()

            # Ollama returns embeddings as an array with first element being the embedding
            embedding = data["embeddings"][0] if "embeddings" in data and data["embeddings"] else []

            return EmbeddingResult(
                embedding=embedding,
                model=self.config.embedding_model,
                token_count=None,  # Ollama doesn't return token count for embeddings
            )

        except httpx.RequestError as e:
            logger.error(f"Ollama embedding request failed: {e}")
            raise RuntimeError(f"Failed to generate embedding: {e}")
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama embedding HTTP error: {e}")
            raise RuntimeError(f"Ollama API error: {e}")

    async def _chat(self, payload: dict[str, Any]) -> ResponseResult:
        try:
            logger.debug(f"Sending chat request to Ollama with model: {self.config.model}")
            response = await self.client.post(
                "/api/chat",
                json=payload,
                timeout=self.config.generate_timeout,
            )
            response.raise_for_status()
            data = response.json()

            return ResponseResult(
                content=data.get("message", {}).get("content", ""),
                model=self.config.model,
                token_count=data.get("eval_count"),
                finish_reason=data.get("done_reason"),
            )

        except httpx.TimeoutException as e:
            logger.error(f"Ollama request timed out after {self.config.generate_timeout}s: {e}")
            raise RuntimeError(f"Ollama request timed out: {e}")
        except httpx.RequestError as e:
            logger.error(f"Ollama chat request failed: {e}")
            logger.error(f"Model: {self.config.model}, Host: {self.config.host}")
            raise RuntimeError(f"Failed to generate response: {e}")
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama chat HTTP error: {e}")
            logger.error(f"Status: {e.response.status_code}")
            raise RuntimeError(f"Ollama API error: {e}")

    async def generate_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> ResponseResult:
        """Generate response using Ollama's chat model.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Returns:
            ResponseResult with generated response
        """
        return await self._chat(
            {
                "model": self.config.model,
                "messages": [*(history or []), {"role": "user", "content": prompt}],
                "stream": False,
            }
        )

    async def generate_structured(
        self,
        prompt: str,
        history: list[Message] | None = None,
        temperature: float = 0.1,
    ) -> ResponseResult:
        """Generate a JSON object using Ollama's JSON format mode.

        Args:
            prompt: Instruction prompt describing the expected JSON structure
            history: Optional prior conversation turns
            temperature: Sampling temperature

        Returns:
            ResponseResult whose content is a JSON document
        """
        return await self._chat(
            {
                "model": self.config.model,
                "messages": [*(history or []), {"role": "system", "content": prompt}],
                "format": "json",
                "stream": False,
                "options": {"temperature": temperature},
            }
        )

    async def stream_response(
        self,
        prompt: str,
        history: list[Message] | None = None,
    ) -> AsyncIterator[str]:
        """Stream a chat response from Ollama's line-delimited JSON stream.

        Args:
            prompt: User prompt or question
            history: Optional prior conversation turns

        Yields:
            Text deltas in generation order
        """
        payload = {
            "model": self.config.model,
            "messages": [*(history or []), {"role": "user", "content": prompt}],
            "stream": True,
        }

        try:
            async with self.client.stream(
                "POST", "/api/chat", json=payload, timeout=self.config.generate_timeout
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line:
                        continue
                    data = json.loads(line)
                    delta = data.get("message", {}).get("content", "")
                    if delta:
                        yield delta
                    if data.get("done"):
                        break

        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.error(f"Ollama streaming request failed: {e}")
            raise RuntimeError(f"Failed to stream response: {e}")

    async def health_check(self) -> bool:
        """Check if Ollama service is healthy.

        Returns:
            True if healthy, False otherwise
        """
        try:
            response = await self.client.get("/api/tags")
            return response.status_code == 200
        except Exception as e:
            logger.warning(f"Ollama health check failed: {e}")
            return False

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()
