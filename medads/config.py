"""Configuration management using pydantic-settings."""

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    OLLAMA = "ollama"
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Provider Configuration
    llm_provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="LLM provider used for classification, analysis and answers",
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI chat model, also used to pick the latency model factor",
    )
    openai_embedding_model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model used for semantic similarity",
    )

    # Ollama Configuration
    ollama_host: str = Field(
        default="http://localhost:11434",
        description="Ollama API host URL",
    )
    ollama_model: str = Field(
        default="llama3.2",
        description="Ollama model to use",
    )
    ollama_embedding_model: str = Field(
        default="nomic-embed-text",
        description="Ollama embedding model to use",
    )

    # Google Gemini Configuration
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Google Gemini model to use",
    )

    # Anthropic Configuration
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key",
    )
    anthropic_model: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Anthropic model to use",
    )

    # Sponsored content scoring
    confidence_threshold: float = Field(
        default=0.65,
        ge=0.0,
        le=1.0,
        description="Minimum confidence required to show sponsored content",
    )
    enable_semantic_analysis: bool = Field(
        default=True,
        description="Use embedding similarity when scoring sponsor matches",
    )
    enable_debug: bool = Field(
        default=False,
        description="Echo intermediate embeddings back in scoring results",
    )
    mapping_min_keyword_length: int = Field(
        default=3,
        ge=0,
        description="Minimum term length for substring keyword/medication matches",
    )
    catalog_path: Path | None = Field(
        default=None,
        description="Optional JSON file overriding the built-in sponsor catalog",
    )

    # Application Configuration
    api_timeout_ms: int = Field(
        default=30000,
        description="Timeout applied to upstream LLM calls in milliseconds",
    )
    host: str = Field(
        default="0.0.0.0",
        description="HTTP bind address",
    )
    port: int = Field(
        default=3000,
        description="HTTP port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    @property
    def api_timeout_seconds(self) -> int:
        """Get the upstream timeout in whole seconds."""
        return max(1, self.api_timeout_ms // 1000)

    @property
    def chat_model(self) -> str:
        """Chat model of the selected provider."""
        match self.llm_provider:
            case LLMProvider.OLLAMA:
                return self.ollama_model
            case LLMProvider.GEMINI:
                return self.gemini_model
            case LLMProvider.ANTHROPIC:
                return self.anthropic_model
            case _:
                return self.openai_model

    def validate_provider_config(self) -> None:
        """Validate that required API keys are set for the selected provider."""
        if self.llm_provider == LLMProvider.OPENAI and not self.openai_api_key:
            raise ValueError("OpenAI API key is required when using OpenAI provider")
        elif self.llm_provider == LLMProvider.GEMINI and not self.gemini_api_key:
            raise ValueError("Gemini API key is required when using Gemini provider")
        elif self.llm_provider == LLMProvider.ANTHROPIC and not self.anthropic_api_key:
            raise ValueError("Anthropic API key is required when using Anthropic provider")


# Global settings instance - lazy loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
