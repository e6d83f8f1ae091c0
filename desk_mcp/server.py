"""
MCP Server for IKEA Standing Desk Control.

Exposes desk control as tools that LLMs can call via the Model Context Protocol.
One desk connection is kept for the lifetime of the server process.
"""

from fastmcp import FastMCP

from idasen_desk import (
    MAX_HEIGHT_MM,
    MIN_HEIGHT_MM,
    AlreadyMovingError,
    DeskCommunicationError,
    DeskConnectionError,
    DeskController,
    DeskError,
    DeskNotFoundError,
    MoveTimeoutError,
    OutOfRangeError,
    load_settings,
)
from idasen_desk.logging_config import configure_logging

# Create MCP server
mcp = FastMCP(
    "Standing Desk Controller",
    instructions="Control your IKEA Idåsen / Linak standing desk via BLE. "
    "Tools: get_height (check position), check_connection (link status), "
    "move_up/move_down (1cm steps), move_to_height (absolute positioning, 620-1270mm).",
)

_desk: DeskController | None = None


def get_desk() -> DeskController:
    """Return the process-wide desk controller, creating it on first use."""
    global _desk
    if _desk is None:
        _desk = DeskController.from_settings(load_settings())
    return _desk


def describe_error(e: DeskError) -> str:
    """Turn a desk error into a tool result an LLM can act on."""
    if isinstance(e, DeskNotFoundError):
        return "Error: Desk not found. Is it powered on?"
    if isinstance(e, DeskConnectionError):
        return f"Error: Could not connect to desk - {e}"
    if isinstance(e, DeskCommunicationError):
        return f"Error: Communication failed - {e}"
    if isinstance(e, AlreadyMovingError):
        return "Error: Desk is already moving. Wait for the current move to finish."
    if isinstance(e, MoveTimeoutError):
        return f"Error: Move timed out - {e}"
    return f"Error: {e}"


async def _height_report(desk: DeskController, prefix: str) -> str:
    height = await desk.get_height()
    return f"{prefix} {height:.0f}mm ({height / 10:.1f} cm)"


@mcp.tool()
async def get_height() -> str:
    """
    Get the current desk height.

    Returns the height in millimeters and centimeters.
    """
    try:
        return await _height_report(get_desk(), "Current height:")
    except DeskError as e:
        return describe_error(e)


@mcp.tool()
async def check_connection() -> str:
    """Report whether the desk is connected, connecting first if needed."""
    desk = get_desk()
    await desk.auto_connect()
    return f"Connection status: {desk.check_connection().value}"


async def _step(up: bool, steps: int) -> str:
    if steps <= 0:
        return "Error: steps must be positive"
    if steps > 25:
        return "Error: Maximum movement is 25 steps (25cm) at a time for safety"

    desk = get_desk()
    try:
        for _ in range(steps):
            await desk.move_by_step(up)
        return await _height_report(desk, "Moved up to" if up else "Moved down to")
    except DeskError as e:
        return describe_error(e)


@mcp.tool()
async def move_up(steps: int = 1) -> str:
    """
    Move the desk up in 1cm steps.

    Args:
        steps: How many centimeters to move up (default: 1)

    Returns:
        Result of the movement including final height.
    """
    return await _step(True, steps)


@mcp.tool()
async def move_down(steps: int = 1) -> str:
    """
    Move the desk down in 1cm steps.

    Args:
        steps: How many centimeters to move down (default: 1)

    Returns:
        Result of the movement including final height.
    """
    return await _step(False, steps)


@mcp.tool()
async def move_to_height(height_mm: int) -> str:
    """
    Move the desk to a specific height in millimeters.

    Args:
        height_mm: Target height in millimeters (valid range: 620-1270mm)

    Returns:
        Result of the movement including final height.
    """
    desk = get_desk()
    try:
        await desk.move_to_height(height_mm)
        return await _height_report(desk, f"Target was {height_mm}mm. Now at")
    except OutOfRangeError:
        return f"Error: Height must be between {MIN_HEIGHT_MM}mm and {MAX_HEIGHT_MM}mm"
    except DeskError as e:
        return describe_error(e)


def run_server():
    """Run the MCP server."""
    settings = load_settings()
    configure_logging(settings.log_level)
    mcp.run()


if __name__ == "__main__":
    run_server()
