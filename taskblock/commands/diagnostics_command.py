import shutil
import subprocess
import sys
from typing import Optional

from rich.console import Console

from ..automation_api.query_builder import BACKENDS
from ..utils.config import get_osascript_path
from ..utils.logger import get_logger

log = get_logger(__name__)


def _is_running(process_name: str) -> bool:
    try:
        result = subprocess.run(["pgrep", "-x", process_name], capture_output=True)
    except (FileNotFoundError, OSError) as e:
        log.debug("pgrep unavailable: %s", e)
        return False
    return result.returncode == 0


def handle_diagnostics(console: Optional[Console] = None) -> int:
    """Health check: platform, automation interpreter, task managers running."""
    console = console or Console()
    problems = 0

    on_macos = sys.platform == "darwin"
    console.print(("✅" if on_macos else "❌") + f" Platform: {sys.platform}", style="green" if on_macos else "red")
    problems += not on_macos

    osascript = get_osascript_path()
    found = shutil.which(osascript)
    console.print(
        ("✅" if found else "❌") + f" Automation interpreter: {found or osascript + ' (not found)'}",
        style="green" if found else "red",
    )
    problems += not found

    for backend in BACKENDS.values():
        running = _is_running(backend.application)
        # Not fatal: osascript launches the app on demand.
        console.print(
            ("✅" if running else "⚠️ ") + f" {backend.application} running",
            style="green" if running else "yellow",
        )

    return 1 if problems else 0
