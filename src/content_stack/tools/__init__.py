"""Tool registry and session middleware."""

from content_stack.tools.middleware import INITIAL_CONTEXT_TOOL, ToolSession, require_initial_context
from content_stack.tools.registry import ToolDefinition, ToolRegistry, build_registry

__all__ = [
    "INITIAL_CONTEXT_TOOL",
    "ToolDefinition",
    "ToolRegistry",
    "ToolSession",
    "build_registry",
    "require_initial_context",
]
