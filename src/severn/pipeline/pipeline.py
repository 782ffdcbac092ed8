"""Pipeline of agents driven in sequence through a prompting backend."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from severn.errors import NoAgentsExist
from severn.pipeline.context import PipelineLogger, StepResult

if TYPE_CHECKING:
    from severn.agents.base import Agent
    from severn.data_sources.base import DataSource
    from severn.models.base import PromptModel

EMPTY_CONTEXT = ""


@dataclass(frozen=True)
class Pipeline:
    """An ordered sequence of agents with an optional data source.

    A pipeline is an immutable value: every builder method returns a new
    pipeline, so runs already in flight never observe a change and one
    pipeline may be run concurrently from several tasks.

    Running threads a single context string through the agents. The
    context starts as the data source's retrieval (or empty), and each
    agent's reply replaces it before the next agent is prompted. The
    first error from the data source or the backend ends the run and is
    raised unchanged.

    Example:
        pipeline = (
            Pipeline()
            .add_agent(StaticAgent("writer", "write concisely"))
            .add_agent(StaticAgent("reviewer", "review harshly"))
        )
        result = await pipeline.run_pipeline("summarize X", backend)
    """

    agents: tuple[Agent, ...] = field(default_factory=tuple)
    data_source: DataSource | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.agents, tuple):
            object.__setattr__(self, "agents", tuple(self.agents))

    def __len__(self) -> int:
        return len(self.agents)

    # Builder

    def add_agent(self, agent: Agent) -> Pipeline:
        """Return a pipeline with ``agent`` appended."""
        return replace(self, agents=self.agents + (agent,))

    def add_agents(self, *agents: Agent) -> Pipeline:
        """Return a pipeline with ``agents`` appended in order."""
        return replace(self, agents=self.agents + agents)

    def add_data_source(self, data_source: DataSource) -> Pipeline:
        """Return a pipeline seeded by ``data_source``, replacing any previous one."""
        return replace(self, data_source=data_source)

    def remove_agent_at_index(self, index: int) -> Pipeline:
        """Return a pipeline without the agent at ``index``.

        Raises:
            NoAgentsExist: If there is no agent at that position.
        """
        self._agent_at(index)
        return replace(self, agents=self.agents[:index] + self.agents[index + 1 :])

    def remove_agent_by_name(self, name: str) -> Pipeline:
        """Return a pipeline without the first agent named ``name``.

        Raises:
            NoAgentsExist: If no agent has that name.
        """
        index = self._index_of(name)
        return replace(self, agents=self.agents[:index] + self.agents[index + 1 :])

    # Lookup

    def agent_names(self) -> list[str]:
        return [agent.name() for agent in self.agents]

    def get_agent_by_name(self, name: str) -> Agent | None:
        """Get the first agent with an exactly matching name."""
        try:
            return self.agents[self._index_of(name)]
        except NoAgentsExist:
            return None

    def _index_of(self, name: str) -> int:
        for index, agent in enumerate(self.agents):
            if agent.name() == name:
                return index
        raise NoAgentsExist(f"No agent named '{name}' in the pipeline")

    def _agent_at(self, index: int) -> Agent:
        # Negative indexes are out of range rather than counted from the end
        if not 0 <= index < len(self.agents):
            raise NoAgentsExist(
                f"No agent at index {index} (pipeline has {len(self.agents)})"
            )
        return self.agents[index]

    # Execution

    async def run_pipeline(
        self,
        prompt: str,
        backend: PromptModel,
        data_source: DataSource | None = None,
        pipeline_logger: PipelineLogger | None = None,
    ) -> str:
        """Run every agent in order and return the last agent's reply.

        Args:
            prompt: User prompt given to every agent.
            backend: Prompting backend used for each agent.
            data_source: Overrides the registered data source for this call.
            pipeline_logger: Collects progress records and step results.

        Returns:
            The final agent's output.

        Raises:
            NoAgentsExist: If the pipeline has no agents.
            PipelineError: Whatever the data source or backend raised.
        """
        run_logger = pipeline_logger or PipelineLogger()
        if not self.agents:
            run_logger.error("Pipeline run attempted with no agents")
            raise NoAgentsExist()

        run_logger.info(f"Starting pipeline with {len(self.agents)} agents")
        start_time = time.perf_counter()

        context = await self._resolve_context(data_source, run_logger)
        for index, agent in enumerate(self.agents):
            context = await self._invoke(backend, prompt, context, agent, index, run_logger)

        run_logger.info(f"Pipeline complete in {time.perf_counter() - start_time:.1f}s")
        return context

    async def run_agent_at_index(
        self,
        prompt: str,
        index: int,
        backend: PromptModel,
        data_source: DataSource | None = None,
        pipeline_logger: PipelineLogger | None = None,
    ) -> str:
        """Run only the agent at ``index`` against the initial context.

        Raises:
            NoAgentsExist: If ``index`` is out of range; the data source
                and backend are not called.
        """
        agent = self._agent_at(index)
        run_logger = pipeline_logger or PipelineLogger()
        context = await self._resolve_context(data_source, run_logger)
        return await self._invoke(backend, prompt, context, agent, index, run_logger)

    async def run_agent_by_name(
        self,
        prompt: str,
        name: str,
        backend: PromptModel,
        data_source: DataSource | None = None,
        pipeline_logger: PipelineLogger | None = None,
    ) -> str:
        """Run only the first agent named ``name`` against the initial context.

        Raises:
            NoAgentsExist: If no agent has that name; the data source
                and backend are not called.
        """
        index = self._index_of(name)
        run_logger = pipeline_logger or PipelineLogger()
        context = await self._resolve_context(data_source, run_logger)
        return await self._invoke(
            backend, prompt, context, self.agents[index], index, run_logger
        )

    async def _resolve_context(
        self,
        override: DataSource | None,
        run_logger: PipelineLogger,
    ) -> str:
        source = override if override is not None else self.data_source
        if source is None:
            return EMPTY_CONTEXT

        run_logger.debug(f"Retrieving initial context from {source!r}")
        try:
            return await source.retrieve_data()
        except Exception as e:
            run_logger.warning(f"Data source failed: {e}")
            raise

    async def _invoke(
        self,
        backend: PromptModel,
        prompt: str,
        context: str,
        agent: Agent,
        index: int,
        run_logger: PipelineLogger,
    ) -> str:
        name = agent.name()
        run_logger.debug(f"Prompting agent {index}: {name}", agent=name)

        start_time = time.perf_counter()
        try:
            result = await backend.prompt(prompt, context, agent)
        except Exception as e:
            duration = time.perf_counter() - start_time
            run_logger.record_step(
                StepResult(
                    agent_name=name,
                    index=index,
                    success=False,
                    duration_seconds=duration,
                    error=str(e),
                )
            )
            run_logger.warning(f"Agent failed: {name} - {e}", agent=name)
            raise

        duration = time.perf_counter() - start_time
        run_logger.record_step(
            StepResult(
                agent_name=name,
                index=index,
                success=True,
                duration_seconds=duration,
            )
        )
        run_logger.info(f"Completed agent: {name} ({duration:.1f}s)", agent=name)
        return result

