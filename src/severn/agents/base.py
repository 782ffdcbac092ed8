"""Base agent class for severn pipelines."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Agent(ABC):
    """Base class for severn agents.

    An agent is only an identity: a display name and the system
    instruction sent to the model on every invocation. Agents never call
    a model themselves; a ``PromptModel`` does that on their behalf, so
    the same agent can run against any backend.

    Implementations must be pure and safe to share between pipelines and
    concurrent runs.

    Example:
        class Summarizer(Agent):
            def name(self) -> str:
                return "Summarizer"

            def system_message(self) -> str:
                return "Summarize the provided context in three sentences."
    """

    @abstractmethod
    def name(self) -> str:
        """Return the agent's display and lookup name."""
        pass

    @abstractmethod
    def system_message(self) -> str:
        """Return the fixed system instruction for this agent."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name()!r})"


class StaticAgent(Agent):
    """Agent with a fixed name and system message."""

    def __init__(self, name: str, system_message: str):
        self._name = name
        self._system_message = system_message

    def name(self) -> str:
        return self._name

    def system_message(self) -> str:
        return self._system_message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StaticAgent):
            return NotImplemented
        return (self._name, self._system_message) == (
            other._name,
            other._system_message,
        )

    def __hash__(self) -> int:
        return hash((self._name, self._system_message))
