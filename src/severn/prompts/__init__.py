"""System-message templates for severn agents."""

from severn.prompts.loader import PromptLoader, SystemPrompt, render_system_message

__all__ = ["PromptLoader", "SystemPrompt", "render_system_message"]
