"""
MCP Tools for the Business Central MCP Server
"""

from .registry import ToolRegistry

__all__ = ["ToolRegistry"]
