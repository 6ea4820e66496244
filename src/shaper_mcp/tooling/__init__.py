"""Tool-layer helpers for shaped responses."""

from .handlers import ToolHandler

__all__ = ["ToolHandler"]
