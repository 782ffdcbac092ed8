"""Exception hierarchy for severn pipelines."""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for every failure surfaced by severn."""

    pass


class NoAgentsExist(PipelineError):
    """Raised when a run has no agent to invoke.

    Covers both an empty pipeline and an index or name lookup that
    did not resolve to an agent.
    """

    def __init__(self, message: str = "There's no agents in the pipeline!"):
        super().__init__(message)


class DataSourceNoMatch(PipelineError):
    """Raised when a data source was reachable but produced no usable result."""

    def __init__(self, message: str = "Searched data source but no results"):
        super().__init__(message)


class OptionIsNone(PipelineError):
    """Raised when a required value was absent, e.g. a model reply with no text."""

    def __init__(self, message: str = "Expected a value but got None"):
        super().__init__(message)


class BackendError(PipelineError):
    """Raised when a model, vector store or HTTP call failed.

    The collaborator's native exception is kept on ``cause`` and chained
    as ``__cause__`` by the raising site.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class SerializationError(PipelineError):
    """Raised when context or a result could not be encoded or decoded."""

    pass
