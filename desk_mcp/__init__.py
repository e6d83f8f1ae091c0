"""
Model Context Protocol front end for the Idåsen desk.

Importing this package builds the FastMCP app; the desk itself is only
contacted when a tool is first called.
"""

from desk_mcp.server import get_desk, mcp, run_server

__all__ = ["get_desk", "mcp", "run_server"]
