"""Multi-provider LLM backends."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from severn.config import BackendConfig
from severn.errors import BackendError, OptionIsNone
from severn.models.base import EmbedModel, PromptModel, build_user_message

if TYPE_CHECKING:
    from severn.agents.base import Agent

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"


class LLMBackend(PromptModel):
    """Prompting backend for OpenAI, Anthropic, Google and Ollama models.

    Each call sends the agent's system message as the system instruction
    and the prompt plus the serialized context as the user message, then
    extracts exactly one text reply.

    Example:
        backend = LLMBackend(BackendConfig.from_env("anthropic"))
        result = await pipeline.run_pipeline("Summarize the findings", backend)
    """

    def __init__(self, config: BackendConfig, client: Any = None):
        """Initialize the backend.

        Args:
            config: Provider, credentials and sampling settings.
            client: Pre-built provider client (optional, built lazily from config).
        """
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        """Get or create the provider client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> Any:
        """Create the async client for the configured provider."""
        provider = self.config.provider
        if provider in ("openai", "ollama"):
            from openai import AsyncOpenAI

            return AsyncOpenAI(
                api_key=self.config.api_key or "ollama",
                base_url=self.config.resolved_base_url,
                organization=self.config.organization,
            )
        elif provider == "anthropic":
            from anthropic import AsyncAnthropic

            return AsyncAnthropic(api_key=self.config.api_key)
        elif provider == "google":
            import google.generativeai as genai

            genai.configure(api_key=self.config.api_key)
            return genai
        else:
            raise ValueError(f"Unsupported provider: {provider}")

    async def prompt(self, prompt: str, context: str, agent: Agent) -> str:
        user_message = build_user_message(prompt, context)
        system_message = agent.system_message()

        provider = self.config.provider
        if provider in ("openai", "ollama"):
            text = await self._prompt_openai(system_message, user_message)
        elif provider == "anthropic":
            text = await self._prompt_anthropic(system_message, user_message)
        elif provider == "google":
            text = await self._prompt_google(system_message, user_message)
        else:
            raise ValueError(f"Unsupported provider: {provider}")

        logger.debug(
            f"Retrieved result for agent '{agent.name()}' from {provider} "
            f"({len(text)} chars)"
        )
        return text

    async def _prompt_openai(self, system_message: str, user_message: str) -> str:
        """Call the chat completions API."""
        from openai import OpenAIError

        try:
            response = await self.client.chat.completions.create(
                model=self.config.resolved_model,
                messages=[
                    {"role": "system", "content": system_message},
                    {"role": "user", "content": user_message},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except OpenAIError as e:
            raise BackendError(f"OpenAI request failed: {e}", cause=e) from e

        if not response.choices:
            raise OptionIsNone("Model returned no choices")

        content = response.choices[0].message.content
        if not content:
            raise OptionIsNone("Model reply has no text content")
        return content

    async def _prompt_anthropic(self, system_message: str, user_message: str) -> str:
        """Call the Anthropic messages API."""
        from anthropic import AnthropicError

        try:
            response = await self.client.messages.create(
                model=self.config.resolved_model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=system_message,
                messages=[{"role": "user", "content": user_message}],
            )
        except AnthropicError as e:
            raise BackendError(f"Anthropic request failed: {e}", cause=e) from e

        texts = [block.text for block in response.content if hasattr(block, "text")]
        if not "".join(texts):
            logger.warning(
                f"No text block in Anthropic response. "
                f"Stop reason: {response.stop_reason}, "
                f"Content types: {[type(b).__name__ for b in response.content]}"
            )
            raise OptionIsNone("Model reply has no text content")
        return "".join(texts)

    async def _prompt_google(self, system_message: str, user_message: str) -> str:
        """Call the Gemini API."""
        from google.api_core.exceptions import GoogleAPIError

        model = self.client.GenerativeModel(
            self.config.resolved_model,
            system_instruction=system_message,
        )
        try:
            response = await model.generate_content_async(
                user_message,
                generation_config={
                    "temperature": self.config.temperature,
                    "max_output_tokens": self.config.max_tokens,
                },
            )
        except GoogleAPIError as e:
            raise BackendError(f"Google request failed: {e}", cause=e) from e

        # response.text raises ValueError when there are no candidates
        try:
            text = response.text
        except ValueError as e:
            raise OptionIsNone(f"Model reply has no text content: {e}") from e
        if not text:
            raise OptionIsNone("Model reply has no text content")
        return text


class OpenAIEmbedder(EmbedModel):
    """Embedding backend using the OpenAI embeddings API."""

    def __init__(
        self,
        config: BackendConfig,
        client: Any = None,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int | None = None,
    ):
        self.config = config
        self.model = model
        self.dimensions = dimensions
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.resolved_base_url,
                organization=self.config.organization,
            )
        return self._client

    async def _create(self, inputs: str | list[str]) -> list[list[float]]:
        from openai import OpenAIError

        kwargs: dict[str, Any] = {"model": self.model, "input": inputs}
        if self.dimensions is not None:
            kwargs["dimensions"] = self.dimensions

        try:
            response = await self.client.embeddings.create(**kwargs)
        except OpenAIError as e:
            raise BackendError(f"Embedding request failed: {e}", cause=e) from e

        if not response.data:
            raise OptionIsNone("There were no embeddings returned by OpenAI")
        return [item.embedding for item in response.data]

    async def embed_sentence(self, text: str) -> list[float]:
        embeddings = await self._create(text)
        return embeddings[0]

    async def embed_file(self, chunks: list[str]) -> list[list[float]]:
        if not chunks:
            return []
        return await self._create(chunks)
