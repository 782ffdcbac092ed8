"""Prompting and embedding backend interfaces."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from severn.errors import SerializationError

if TYPE_CHECKING:
    from severn.agents.base import Agent


def build_user_message(prompt: str, context: str) -> str:
    """Compose the user message sent alongside an agent's system message.

    The context is JSON-encoded so that quotes and newlines in a previous
    agent's reply cannot be mistaken for instructions.

    Raises:
        SerializationError: If the context cannot be encoded.
    """
    try:
        encoded = json.dumps(context, indent=2)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Could not encode context: {e}") from e

    return f"{prompt}\n\nProvided context:\n{encoded}\n"


class PromptModel(ABC):
    """Base class for prompting backends.

    A backend turns (prompt, context, agent) into the agent's reply by
    calling an external model. It is supplied per run, never stored on
    a pipeline, and owns any retry policy it wants; the pipeline never
    retries on its behalf.
    """

    @abstractmethod
    async def prompt(self, prompt: str, context: str, agent: Agent) -> str:
        """Produce the agent's reply.

        Args:
            prompt: The user's prompt, identical for every agent in a run.
            context: Output of the previous step (or the retrieved data).
            agent: Agent whose system message steers the model.

        Returns:
            Exactly one generated text.

        Raises:
            BackendError: If the model call failed.
            OptionIsNone: If the model returned no text.
            SerializationError: If the context could not be encoded.
        """
        pass


class EmbedModel(ABC):
    """Base class for embedding backends used by vector data sources."""

    @abstractmethod
    async def embed_sentence(self, text: str) -> list[float]:
        """Embed a single query or sentence."""
        pass

    @abstractmethod
    async def embed_file(self, chunks: list[str]) -> list[list[float]]:
        """Embed the chunks of a file, one vector per chunk, in order."""
        pass
