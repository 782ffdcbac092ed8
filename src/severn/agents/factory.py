"""Agent factory for creating agents from YAML definitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from severn.agents.base import StaticAgent
from severn.prompts.loader import PromptLoader, render_system_message

logger = logging.getLogger(__name__)


@dataclass
class AgentDefinition:
    """Definition of an agent from YAML configuration.

    Exactly one of ``system_message`` (inline text) or ``prompt_name``
    (a markdown prompt resolved through a ``PromptLoader``) supplies the
    instruction. Both are rendered as Jinja2 templates with ``variables``.
    """

    name: str
    description: str = ""
    system_message: str | None = None
    prompt_name: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    version: str = "1.0"
    category: str = "general"
    metadata: dict[str, Any] = field(default_factory=dict)


class AgentFactory:
    """Factory for creating agents from YAML definitions.

    Supports layered configuration with customizable search paths.
    Typical layering:
    1. Project config - highest priority
    2. User config - lowest priority

    Example YAML definition (agents/reviewer.yaml):
        name: reviewer
        description: Reviews drafts
        system_message: |
          Review the provided draft {{ style }}.
        variables:
          style: harshly
    """

    def __init__(
        self,
        search_paths: list[Path] | None = None,
        app_name: str = "severn",
        project_dir: Path | None = None,
        prompt_loader: PromptLoader | None = None,
    ):
        """Initialize the agent factory.

        Args:
            search_paths: List of directories to search for agent definitions.
                         If None, uses layered config paths based on app_name.
            app_name: Application name for default path construction.
            project_dir: Project directory for .{app_name}/ lookup.
            prompt_loader: Loader used for definitions that reference a prompt.
        """
        if search_paths is None:
            project_root = project_dir or Path.cwd()

            # Search in order: project, user (first match wins)
            search_paths = [
                project_root / f".{app_name}" / "agents",
                Path.home() / f".{app_name}" / "agents",
            ]

        self._search_paths = list(search_paths)
        self._prompt_loader = prompt_loader or PromptLoader(
            app_name=app_name, project_dir=project_dir
        )
        self._definitions: dict[str, AgentDefinition] = {}
        self._discover()

    def add_search_path(self, path: Path, priority: int = 0) -> None:
        """Add a search path for agent definitions.

        Args:
            path: Directory to search for agent YAML files.
            priority: 0 = highest priority (searched first), -1 = append to end.
        """
        if priority == 0:
            self._search_paths.insert(0, path)
        else:
            self._search_paths.append(path)
        self._discover()

    def register(self, definition: AgentDefinition) -> None:
        """Register a definition programmatically, replacing any with the same name."""
        self._definitions[definition.name] = definition

    def _discover(self) -> None:
        """Discover and load all agent definitions from search paths."""
        self._definitions.clear()
        for search_path in self._search_paths:
            if not search_path.exists():
                continue

            for agent_file in sorted(search_path.glob("*.yaml")):
                self._load_definition(agent_file)

    def _load_definition(self, agent_path: Path) -> None:
        """Load an agent definition from a YAML file.

        Args:
            agent_path: Path to the agent YAML file.
        """
        try:
            with open(agent_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping invalid agent definition {agent_path}: {e}")
            return

        if not isinstance(data, dict):
            return

        name = str(data.get("name", agent_path.stem))
        # Don't override if already loaded (higher priority path wins)
        if name in self._definitions:
            return

        system_message = data.get("system_message")
        prompt_name = data.get("prompt")
        if system_message is None and prompt_name is None:
            logger.warning(
                f"Agent definition {agent_path} has neither 'system_message' nor 'prompt'"
            )
            return

        self._definitions[name] = AgentDefinition(
            name=name,
            description=data.get("description", ""),
            system_message=system_message,
            prompt_name=prompt_name,
            variables=data.get("variables") or {},
            version=str(data.get("version", "1.0")),
            category=data.get("category", "general"),
            metadata=data,
        )
        logger.debug(f"Loaded agent definition '{name}' from {agent_path}")

    def get(self, name: str) -> AgentDefinition | None:
        """Get an agent definition by name."""
        return self._definitions.get(name)

    def create(self, name: str) -> StaticAgent:
        """Build an agent from its definition.

        Args:
            name: Name of the agent definition.

        Returns:
            StaticAgent carrying the rendered system message.

        Raises:
            KeyError: If no definition has that name.
            FileNotFoundError: If the referenced prompt is missing.
            jinja2.UndefinedError: If the template uses an unset variable.
        """
        definition = self.get(name)
        if definition is None:
            raise KeyError(f"Agent '{name}' not found")

        if definition.system_message is not None:
            system_message = render_system_message(
                definition.system_message, definition.variables
            )
        else:
            system_message = self._prompt_loader.render(
                definition.prompt_name or name, definition.variables
            )

        return StaticAgent(definition.name, system_message)

    def list_agents(self) -> list[str]:
        """List all registered agent names."""
        return sorted(self._definitions.keys())

    def list_definitions(self) -> list[AgentDefinition]:
        """List all registered agent definitions."""
        return list(self._definitions.values())

    def get_by_category(self, category: str) -> list[AgentDefinition]:
        """Get agent definitions by category."""
        return [d for d in self._definitions.values() if d.category == category]
