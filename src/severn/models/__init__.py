"""Prompting and embedding backends."""

from severn.models.base import EmbedModel, PromptModel, build_user_message
from severn.models.llm import LLMBackend, OpenAIEmbedder

__all__ = [
    "PromptModel",
    "EmbedModel",
    "build_user_message",
    "LLMBackend",
    "OpenAIEmbedder",
]
