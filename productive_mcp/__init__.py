"""Productive.io MCP server: task inbox and assigned-task tools."""

__version__ = "0.1.0"
