"""
Tool module for log facet operations.

This module provides the `log_facets` tool that a host bridge can mount
to drive sessions through plain dict requests.
"""

from .tool import LogFacetsToolModule, ToolResult, create_tool, mount

__all__ = [
    "LogFacetsToolModule",
    "ToolResult",
    "create_tool",
    "mount",
]
