"""Agent-facing tool interface for git-branch-cleaner."""

from .tools import ToolDefinition, ToolRegistry, ToolResult

__all__ = ["ToolDefinition", "ToolRegistry", "ToolResult"]
