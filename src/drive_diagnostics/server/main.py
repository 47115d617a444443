"""MCP Server initialization."""

from fastmcp import FastMCP

from ..auth.oauth_config import get_oauth_config

# Initialize MCP Server
mcp = FastMCP("Drive Diagnostics")


@mcp.resource("diagnostics://config")
def read_diagnostics_config() -> dict:
    """Read the OAuth configuration the diagnostics compare against."""
    return get_oauth_config().get_environment_summary()
