"""
CLI interface for desk control.

Provides the ``desk-control`` command for reading and moving the desk.
"""

import asyncio
import sys

from rich.console import Console
from rich.markup import escape

from idasen_desk.config import load_settings
from idasen_desk.controller import DeskController
from idasen_desk.errors import DeskError
from idasen_desk.logging_config import configure_logging
from idasen_desk.notifier import ConnectionStatus, LogLevel, Notifier

console = Console()

_STYLES = {
    LogLevel.INFO: "dim",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
}


class ConsoleNotifier(Notifier):
    """Prints notifier events to the terminal."""

    def __init__(self, console: Console, show_heights: bool = True):
        self.console = console
        self.show_heights = show_heights

    def on_log(self, level: LogLevel, message: str, timestamp: str) -> None:
        style = _STYLES[level]
        self.console.print(f"[{style}]{timestamp} {level.value:<5}[/] {escape(message)}")

    def on_height(self, height_mm: float) -> None:
        if self.show_heights:
            self.console.print(f"[cyan]  📏 {height_mm / 10:.1f} cm[/]")

    def on_connection_status(self, status: ConnectionStatus) -> None:
        style = "green" if status is ConnectionStatus.CONNECTED else "red"
        self.console.print(f"[{style}]● {status.value}[/]")


async def run_control(args: list[str], desk: DeskController) -> int:
    """Run a desk command. Returns the process exit code."""
    try:
        if not args or args[0] == "height":
            height = await desk.get_height()
            console.print(f"📏 Height: {height:.0f}mm ({height / 10:.1f} cm)")

        elif args[0] == "status":
            await desk.auto_connect()
            console.print(desk.check_connection().value)

        elif args[0] in ("up", "down"):
            steps = int(args[1]) if len(args) > 1 else 1
            if steps <= 0:
                console.print("[red]❌ Invalid argument:[/] steps must be positive")
                return 1
            for _ in range(steps):
                await desk.move_by_step(args[0] == "up")

        elif args[0] == "goto":
            if len(args) < 2:
                console.print("Usage: goto <height_mm>")
                return 1
            await desk.move_to_height(float(args[1]))

        else:
            console.print(f"Unknown command: {args[0]}")
            print_control_help()
            return 1

    except ValueError as e:
        console.print(f"[red]❌ Invalid argument:[/] {e}")
        return 1
    except DeskError as e:
        console.print(f"[red]❌ {escape(str(e))}[/]")
        return 1
    finally:
        await desk.close()

    return 0


def print_control_help():
    """Print help for desk control commands."""
    console.print(
        """
Usage: desk-control [command] [args]

Commands:
  (no command)     Show current height
  height           Show current height in mm
  status           Connect and show connection status
  up [steps]       Move up by 1cm steps (default: 1)
  down [steps]     Move down by 1cm steps (default: 1)
  goto <mm>        Move to specific height in mm (620-1270)

Examples:
  desk-control                  # Show current height
  desk-control up 3             # Move up 3cm
  desk-control goto 900         # Move to 900mm
""",
        highlight=False,
    )


def main_control():
    """Entry point for desk-control command."""
    if len(sys.argv) > 1 and sys.argv[1] in ("-h", "--help", "help"):
        print_control_help()
        return

    settings = load_settings()
    configure_logging(settings.log_level)
    desk = DeskController.from_settings(settings, ConsoleNotifier(console))
    sys.exit(asyncio.run(run_control(sys.argv[1:], desk)))


if __name__ == "__main__":
    main_control()
