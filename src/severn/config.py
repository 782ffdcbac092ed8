"""Explicit configuration for prompting backends and data sources."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LLMProvider = Literal["openai", "anthropic", "google", "ollama"]

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-5-20250929",
    "google": "gemini-2.0-flash",
    "ollama": "llama3.2",
}

API_KEY_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}

OLLAMA_BASE_URL = "http://localhost:11434/v1"


class BackendConfig(BaseModel):
    """Settings for a prompting or embedding backend.

    Configuration is always passed to backend constructors; nothing in
    severn reads the environment while a pipeline is running. Use
    ``from_env`` to build one from environment variables up front.

    Attributes:
        provider: LLM provider to use.
        api_key: API key for the provider.
        model: Model name (optional, uses provider default).
        base_url: Override for OpenAI-compatible endpoints.
        organization: OpenAI organization id.
        temperature: Sampling temperature.
        max_tokens: Upper bound on generated tokens.
    """

    model_config = ConfigDict(frozen=True)

    provider: LLMProvider = "openai"
    api_key: str = ""
    model: str | None = None
    base_url: str | None = None
    organization: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, gt=0)

    @property
    def resolved_model(self) -> str:
        """Get the configured model or the provider default."""
        return self.model or DEFAULT_MODELS.get(self.provider, "gpt-4o")

    @property
    def resolved_base_url(self) -> str | None:
        """Get the endpoint, defaulting Ollama to its local server."""
        if self.base_url:
            return self.base_url
        if self.provider == "ollama":
            return OLLAMA_BASE_URL
        return None

    @classmethod
    def from_env(
        cls,
        provider: LLMProvider = "openai",
        environ: Mapping[str, str] | None = None,
        **overrides: object,
    ) -> BackendConfig:
        """Build a config from environment variables.

        Args:
            provider: LLM provider to configure.
            environ: Mapping to read from (defaults to ``os.environ``).
            **overrides: Extra field values, e.g. ``model``.

        Returns:
            BackendConfig for the provider.

        Raises:
            KeyError: If the provider's API key variable is not set.
        """
        env = os.environ if environ is None else environ

        if provider == "ollama":
            api_key = "ollama"
        else:
            var = API_KEY_ENV_VARS[provider]
            if var not in env:
                raise KeyError(f"Environment variable {var} is not set")
            api_key = env[var]

        return cls(provider=provider, api_key=api_key, **overrides)


class QdrantConfig(BaseModel):
    """Settings for vector retrieval against a Qdrant collection.

    Attributes:
        collection_name: Collection to search and upsert into.
        payload_field: Payload key holding the document text.
        limit: Number of points requested per search.
        vector_size: Embedding dimensions expected by the collection.
    """

    model_config = ConfigDict(frozen=True)

    collection_name: str = "severn"
    payload_field: str = "document"
    limit: int = Field(default=1, gt=0)
    vector_size: int = Field(default=1536, gt=0)
