"""Drive diagnostics MCP server."""

from .main import mcp

from . import diagnostic_tools

__all__ = ["mcp", "main"]


def main():
    """Entry point for the Drive diagnostics MCP server."""
    mcp.run(show_banner=False)
