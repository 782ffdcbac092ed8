"""Agent identities for severn pipelines."""

from severn.agents.base import Agent, StaticAgent
from severn.agents.factory import AgentDefinition, AgentFactory
from severn.agents.premade import ArticleWriter, Researcher

__all__ = [
    "Agent",
    "StaticAgent",
    "AgentDefinition",
    "AgentFactory",
    "ArticleWriter",
    "Researcher",
]
