"""System-message templates stored as markdown files.

A prompt file carries YAML frontmatter and a Jinja2 body::

    ---
    name: planning
    description: Plans work
    version: 2
    variables:
      steps: 3
    ---
    Plan the work in {{ steps }} steps.

Prompts are indexed by their frontmatter ``name`` (the file stem when it is
absent), so an agent definition refers to a prompt by name, not by path.
Frontmatter ``variables`` are defaults that the caller may override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter
import yaml
from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError

logger = logging.getLogger(__name__)

# Unset variables raise instead of silently rendering as empty text
_env = Environment(undefined=StrictUndefined)


def render_system_message(source: str, variables: dict[str, Any] | None = None) -> str:
    """Render a system-message template and strip surrounding whitespace.

    Raises:
        jinja2.UndefinedError: If the template uses a variable that was not given.
    """
    return _env.from_string(source).render(**(variables or {})).strip()


@dataclass(frozen=True)
class SystemPrompt:
    """A parsed system-message template."""

    name: str
    template: Template = field(repr=False, compare=False)
    description: str = ""
    version: str = "1.0"
    defaults: dict[str, Any] = field(default_factory=dict)
    source: Path | None = None

    def render(self, variables: dict[str, Any] | None = None) -> str:
        """Render with the frontmatter defaults overlaid by ``variables``."""
        return self.template.render(**{**self.defaults, **(variables or {})}).strip()


class PromptLoader:
    """Resolves system-message templates from layered search paths.

    Directories are searched in order and the first prompt with a given
    name wins. Files with unreadable frontmatter or an invalid template are
    skipped with a warning.
    """

    def __init__(
        self,
        search_paths: list[Path] | None = None,
        app_name: str = "severn",
        project_dir: Path | None = None,
    ):
        if search_paths is None:
            project_root = project_dir or Path.cwd()
            search_paths = [
                project_root / f".{app_name}" / "prompts",
                Path.home() / f".{app_name}" / "prompts",
            ]

        self._search_paths = list(search_paths)
        self._prompts: dict[str, SystemPrompt] = {}
        self._discover()

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def add_search_path(self, path: Path, priority: int = 0) -> None:
        """Add a search path; ``priority=0`` searches it first, ``-1`` last."""
        if priority == 0:
            self._search_paths.insert(0, path)
        else:
            self._search_paths.append(path)
        self._discover()

    def _discover(self) -> None:
        self._prompts.clear()
        for search_path in self._search_paths:
            if not search_path.exists():
                continue
            for prompt_file in sorted(search_path.glob("*.md")):
                prompt = self._parse(prompt_file)
                if prompt is not None and prompt.name not in self._prompts:
                    self._prompts[prompt.name] = prompt

    def _parse(self, prompt_path: Path) -> SystemPrompt | None:
        try:
            post = frontmatter.load(prompt_path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning(f"Skipping unreadable prompt {prompt_path}: {e}")
            return None

        try:
            template = _env.from_string(post.content)
        except TemplateSyntaxError as e:
            logger.warning(f"Skipping prompt {prompt_path} with invalid template: {e}")
            return None

        defaults = post.get("variables") or {}
        if not isinstance(defaults, dict):
            logger.warning(f"Ignoring non-mapping 'variables' in {prompt_path}")
            defaults = {}

        return SystemPrompt(
            name=str(post.get("name", prompt_path.stem)),
            template=template,
            description=post.get("description", ""),
            version=str(post.get("version", "1.0")),
            defaults=defaults,
            source=prompt_path,
        )

    def get(self, name: str) -> SystemPrompt | None:
        return self._prompts.get(name)

    def load(self, name: str) -> SystemPrompt:
        """Get a prompt by name.

        Raises:
            FileNotFoundError: If no prompt has that name.
        """
        prompt = self.get(name)
        if prompt is None:
            raise FileNotFoundError(
                f"Prompt '{name}' not found in search paths: {self._search_paths}"
            )
        return prompt

    def render(self, name: str, variables: dict[str, Any] | None = None) -> str:
        """Resolve ``name`` and render it as a system message."""
        prompt = self.load(name)
        logger.debug(f"Rendering prompt '{name}' from {prompt.source}")
        return prompt.render(variables)

    def list_prompts(self) -> list[str]:
        return sorted(self._prompts)
