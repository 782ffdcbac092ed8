"""Pipeline loader for loading pipeline definitions from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from severn.pipeline.pipeline import Pipeline

if TYPE_CHECKING:
    from severn.agents.factory import AgentFactory
    from severn.data_sources.base import DataSource

logger = logging.getLogger(__name__)


@dataclass
class AgentStep:
    """Reference to an agent definition inside a pipeline definition."""

    name: str
    enabled: bool = True


@dataclass
class PipelineDefinition:
    """Definition of a pipeline from YAML configuration."""

    name: str
    description: str = ""
    version: str = "1.0"
    agents: list[AgentStep] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def enabled_agents(self) -> list[str]:
        return [step.name for step in self.agents if step.enabled]


class PipelineLoader:
    """Loads pipeline definitions from YAML files.

    Supports layered configuration with customizable search paths.
    Agents are referenced by name and resolved through an ``AgentFactory``.

    Example YAML definition (pipelines/blog.yaml):
        name: blog
        description: Research a topic, then write it up
        agents:
          - researcher
          - name: reviewer
            enabled: false
          - writer
    """

    def __init__(
        self,
        search_paths: list[Path] | None = None,
        app_name: str = "severn",
        project_dir: Path | None = None,
    ):
        """Initialize the pipeline loader.

        Args:
            search_paths: List of directories to search for pipelines.
                         If None, uses layered config paths based on app_name.
            app_name: Application name for default path construction.
            project_dir: Project directory for .{app_name}/ lookup.
        """
        if search_paths is None:
            project_root = project_dir or Path.cwd()

            # Search in order: project, user (first match wins)
            search_paths = [
                project_root / f".{app_name}" / "pipelines",
                Path.home() / f".{app_name}" / "pipelines",
            ]

        self._search_paths = list(search_paths)
        self._pipelines: dict[str, PipelineDefinition] = {}
        self._discover()

    def add_search_path(self, path: Path, priority: int = 0) -> None:
        """Add a search path for pipeline definitions.

        Args:
            path: Directory to search for pipeline YAML files.
            priority: 0 = highest priority (searched first), -1 = append to end.
        """
        if priority == 0:
            self._search_paths.insert(0, path)
        else:
            self._search_paths.append(path)
        self._discover()

    def _discover(self) -> None:
        """Discover and load all pipeline definitions from search paths."""
        self._pipelines.clear()
        for search_path in self._search_paths:
            if not search_path.exists():
                continue

            for pipeline_file in sorted(search_path.glob("*.yaml")):
                self._load_definition(pipeline_file)

    def _load_definition(self, pipeline_path: Path) -> None:
        """Load a pipeline definition from a YAML file."""
        try:
            with open(pipeline_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping invalid pipeline definition {pipeline_path}: {e}")
            return

        if not isinstance(data, dict):
            return

        name = str(data.get("name", pipeline_path.stem))

        # Don't override if already loaded (higher priority path wins)
        if name in self._pipelines:
            return

        steps = []
        for step_data in data.get("agents") or []:
            if isinstance(step_data, str):
                steps.append(AgentStep(name=step_data))
            elif isinstance(step_data, dict) and "name" in step_data:
                steps.append(
                    AgentStep(
                        name=str(step_data["name"]),
                        enabled=bool(step_data.get("enabled", True)),
                    )
                )
            else:
                logger.warning(f"Ignoring malformed agent entry in {pipeline_path}: {step_data!r}")

        self._pipelines[name] = PipelineDefinition(
            name=name,
            description=data.get("description", ""),
            version=str(data.get("version", "1.0")),
            agents=steps,
            metadata=data,
        )

    def get(self, name: str) -> PipelineDefinition | None:
        """Get a pipeline definition by name."""
        return self._pipelines.get(name)

    def load(self, name: str) -> PipelineDefinition:
        """Load a pipeline definition by name.

        Raises:
            FileNotFoundError: If pipeline not found.
        """
        pipeline = self.get(name)
        if pipeline is None:
            raise FileNotFoundError(f"Pipeline '{name}' not found")
        return pipeline

    def build(
        self,
        name: str,
        factory: AgentFactory,
        data_source: DataSource | None = None,
    ) -> Pipeline:
        """Build a runnable pipeline from its definition.

        Args:
            name: Name of the pipeline definition.
            factory: Factory resolving agent names to agents.
            data_source: Optional data source to register.

        Returns:
            Pipeline with the enabled agents in definition order.

        Raises:
            FileNotFoundError: If pipeline not found.
            KeyError: If a referenced agent has no definition.
        """
        definition = self.load(name)
        agents = tuple(factory.create(agent_name) for agent_name in definition.enabled_agents)
        logger.info(f"Loaded pipeline '{definition.name}' with {len(agents)} agents")
        return Pipeline(agents=agents, data_source=data_source)

    def list_pipelines(self) -> list[str]:
        """List all registered pipeline names."""
        return sorted(self._pipelines.keys())
