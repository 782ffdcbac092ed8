"""severn - compose LLM agents into sequential pipelines.

Each agent's reply becomes the next agent's context, optionally seeded
by a retrieval step against a data source.
"""

__version__ = "0.1.0"

from severn.agents.base import Agent, StaticAgent
from severn.config import BackendConfig, QdrantConfig
from severn.data_sources.base import DataSource, StaticDataSource
from severn.errors import (
    BackendError,
    DataSourceNoMatch,
    NoAgentsExist,
    OptionIsNone,
    PipelineError,
    SerializationError,
)
from severn.models.base import EmbedModel, PromptModel
from severn.pipeline.context import PipelineLogger, StepResult
from severn.pipeline.pipeline import Pipeline

__all__ = [
    # Agents
    "Agent",
    "StaticAgent",
    # Data sources
    "DataSource",
    "StaticDataSource",
    # Backends
    "PromptModel",
    "EmbedModel",
    # Pipeline
    "Pipeline",
    "PipelineLogger",
    "StepResult",
    # Config
    "BackendConfig",
    "QdrantConfig",
    # Errors
    "PipelineError",
    "NoAgentsExist",
    "DataSourceNoMatch",
    "OptionIsNone",
    "BackendError",
    "SerializationError",
]
