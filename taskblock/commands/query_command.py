import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..automation_api.query_builder import get_backend
from ..pipeline import BlockPipeline
from ..rendering import ConsoleRenderAdapter
from ..utils.config import get_default_backend

OPTION_KEYS = ("type", "tags", "project", "area")


def block_source_from_args(args) -> Optional[str]:
    """
    Assemble block text from ``--config`` (a file, or ``-`` for stdin) followed
    by any ``--type/--tags/--project/--area`` options, so options override
    lines from the file. Returns ``None`` when the config file can't be read.
    """
    lines = []
    config_path = getattr(args, "config", None)
    if config_path == "-":
        lines.append(sys.stdin.read())
    elif config_path:
        try:
            lines.append(Path(config_path).read_text(encoding="utf-8"))
        except OSError as e:
            print(f"Error: could not read {config_path}: {e}", file=sys.stderr)
            return None
    for key in OPTION_KEYS:
        value = getattr(args, key, None)
        if value:
            lines.append(f"{key}: {value}")
    return "\n".join(lines)


def _backend_from_args(args):
    return get_backend(getattr(args, "backend", None) or get_default_backend())


def handle_script(args) -> int:
    """Print the generated JXA program for review without running it."""
    source = block_source_from_args(args)
    if source is None:
        return 1
    backend = _backend_from_args(args)
    print(BlockPipeline(backend).build_script(source))
    return 0


def handle_query(args) -> int:
    """Run a single block and print its items as a table or JSON."""
    source = block_source_from_args(args)
    if source is None:
        return 1
    backend = _backend_from_args(args)

    if getattr(args, "json", False):
        result = BlockPipeline(backend).query(source)
        if result.not_found:
            print(result.not_found.message(), file=sys.stderr)
        print(json.dumps([item.to_dict() for item in result.items], indent=2))
        return 0

    adapter = ConsoleRenderAdapter(backend, console=Console(), interactive=getattr(args, "interactive", False))
    BlockPipeline(backend, adapter).process(source)
    return 0
