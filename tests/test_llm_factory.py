"""Tests for LLM factory functions."""

from unittest.mock import patch

import pytest

from medads.config import LLMProvider as LLMProviderEnum
from medads.config import Settings
from medads.llm.anthropic import AnthropicProvider
from medads.llm.factory import create_embedding_provider, create_llm_provider
from medads.llm.ollama import OllamaProvider
from medads.llm.openai import OpenAIProvider


class TestLLMFactory:
    """Test LLM factory functions."""

    def test_create_ollama_provider(self):
        """Test creating Ollama provider."""
        settings = Settings(
            llm_provider=LLMProviderEnum.OLLAMA,
            ollama_host="http://test:11434",
            ollama_model="llama3.2",
            api_timeout_ms=15000,
        )

        provider = create_llm_provider(settings=settings)
        assert isinstance(provider, OllamaProvider)
        assert provider.config.host == "http://test:11434"
        assert provider.config.model == "llama3.2"
        assert provider.config.timeout == 15

    def test_create_openai_provider(self):
        """Test creating OpenAI provider."""
        settings = Settings(
            llm_provider=LLMProviderEnum.OPENAI,
            openai_api_key="test-key",
            openai_model="gpt-4-turbo",
        )

        provider = create_llm_provider(settings=settings)
        assert isinstance(provider, OpenAIProvider)
        assert provider.config.api_key == "test-key"
        assert provider.config.model == "gpt-4-turbo"

    def test_create_openai_provider_missing_key(self):
        """Test creating OpenAI provider without API key."""
        settings = Settings(llm_provider=LLMProviderEnum.OPENAI, openai_api_key=None)

        with pytest.raises(ValueError, match="OpenAI API key is required"):
            create_llm_provider(settings=settings)

    def test_provider_name_override(self):
        """Test an explicit provider name wins over settings."""
        settings = Settings(
            llm_provider=LLMProviderEnum.OPENAI,
            openai_api_key="test-key",
            anthropic_api_key="anthropic-key",
        )

        provider = create_llm_provider(LLMProviderEnum.ANTHROPIC, settings)
        assert isinstance(provider, AnthropicProvider)

    @patch("medads.llm.factory.get_settings")
    def test_defaults_to_global_settings(self, mock_get_settings):
        """Test the global settings are used when none are passed."""
        mock_get_settings.return_value = Settings(
            llm_provider=LLMProviderEnum.OLLAMA,
            ollama_host="http://global:11434",
        )

        provider = create_llm_provider()
        assert isinstance(provider, OllamaProvider)
        assert provider.config.host == "http://global:11434"

    def test_create_embedding_provider_anthropic_fallback(self):
        """Test embedding provider fallback for Anthropic."""
        settings = Settings(
            llm_provider=LLMProviderEnum.ANTHROPIC,
            anthropic_api_key="anthropic-key",
            openai_api_key="test-key",
        )

        provider = create_embedding_provider(settings=settings)
        assert isinstance(provider, OpenAIProvider)

    def test_create_embedding_provider_anthropic_fallback_ollama(self):
        """Test embedding provider fallback to Ollama for Anthropic."""
        settings = Settings(
            llm_provider=LLMProviderEnum.ANTHROPIC,
            anthropic_api_key="anthropic-key",
            openai_api_key=None,
            ollama_host="http://test:11434",
        )

        provider = create_embedding_provider(settings=settings)
        assert isinstance(provider, OllamaProvider)
        assert provider.config.host == "http://test:11434"
