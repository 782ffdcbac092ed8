"""Pipeline execution for severn."""

from severn.pipeline.context import PipelineLogger, StepResult
from severn.pipeline.loader import AgentStep, PipelineDefinition, PipelineLoader
from severn.pipeline.pipeline import EMPTY_CONTEXT, Pipeline

__all__ = [
    # Engine
    "Pipeline",
    "EMPTY_CONTEXT",
    # Loader
    "PipelineLoader",
    "PipelineDefinition",
    "AgentStep",
    # Context
    "PipelineLogger",
    "StepResult",
]
