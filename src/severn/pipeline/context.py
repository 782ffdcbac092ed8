"""Per-run bookkeeping for pipeline execution."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

logger = logging.getLogger("severn.pipeline")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass
class StepResult:
    """Result of invoking one agent during a run."""

    agent_name: str
    index: int
    success: bool
    duration_seconds: float
    error: str | None = None


class PipelineLogger:
    """Logger for one or more pipeline runs with progress reporting.

    Records are kept in memory so callers can inspect a run afterwards;
    every record is also forwarded to the ``severn.pipeline`` logger.

    Example:
        run_logger = PipelineLogger(on_progress=print)
        await pipeline.run_pipeline("Draft the notes", backend, pipeline_logger=run_logger)
        run_logger.steps  # [StepResult(agent_name="writer", ...), ...]
    """

    def __init__(
        self,
        on_progress: Callable[[str], None] | None = None,
        verbose: bool = False,
    ):
        self.on_progress = on_progress
        self.verbose = verbose
        self.logs: list[dict[str, Any]] = []
        self.steps: list[StepResult] = []

    def info(self, message: str, agent: str | None = None) -> None:
        """Log info message and report it as progress."""
        self._log("INFO", message, agent)
        if self.on_progress:
            self.on_progress(message)

    def debug(self, message: str, agent: str | None = None) -> None:
        """Log debug message (only kept if verbose)."""
        if self.verbose:
            self._log("DEBUG", message, agent)
        else:
            logger.debug(message)

    def warning(self, message: str, agent: str | None = None) -> None:
        self._log("WARNING", message, agent)

    def error(self, message: str, agent: str | None = None) -> None:
        self._log("ERROR", message, agent)

    def record_step(self, step: StepResult) -> None:
        self.steps.append(step)

    def _log(self, level: str, message: str, agent: str | None) -> None:
        self.logs.append(
            {
                "timestamp": datetime.now().isoformat(),
                "level": level,
                "agent": agent,
                "message": message,
            }
        )
        logger.log(_LEVELS[level], message)

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        """Get logs, optionally filtered by level."""
        if level is None:
            return list(self.logs)
        return [log for log in self.logs if log["level"] == level]

    def get_results_summary(self) -> dict[str, Any]:
        """Summarize the recorded agent steps."""
        return {
            "steps_run": len([s for s in self.steps if s.success]),
            "steps_failed": len([s for s in self.steps if not s.success]),
            "total_duration": sum(s.duration_seconds for s in self.steps),
            "steps": [
                {
                    "agent": s.agent_name,
                    "index": s.index,
                    "success": s.success,
                    "duration": s.duration_seconds,
                    "error": s.error,
                }
                for s in self.steps
            ],
        }
