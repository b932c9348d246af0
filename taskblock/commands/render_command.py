import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..automation_api.query_builder import available_backends, get_backend
from ..markdown_blocks import Block, find_blocks
from ..pipeline import BlockPipeline
from ..rendering import ConsoleRenderAdapter, HtmlRenderAdapter
from ..utils.logger import get_logger

log = get_logger(__name__)


def replace_blocks(text: str, blocks: List[Block], fragments: List[str]) -> str:
    """Swap each block (fences included) for its rendered fragment."""
    lines = text.splitlines()
    for block, fragment in sorted(zip(blocks, fragments), key=lambda pair: pair[0].start_line, reverse=True):
        lines[block.start_line - 1:block.end_line] = fragment.splitlines()
    result = "\n".join(lines)
    return result + "\n" if text.endswith("\n") else result


def handle_render(args) -> int:
    """
    Render every task block in a markdown file.

    Console tables by default; with ``--html`` write a copy of the document
    where each block is replaced by its HTML table.
    """
    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return 1

    backend_filter: Optional[str] = getattr(args, "backend", None)
    languages = [get_backend(backend_filter).name] if backend_filter else available_backends()
    blocks = find_blocks(text, languages=languages)
    if not blocks:
        print(f"No task blocks found in {path}")
        return 0

    html_out = getattr(args, "html", None)
    console = Console()
    fragments: List[str] = []
    for block in blocks:
        backend = get_backend(block.language)
        log.info("Rendering %s block at %s:%d", backend.name, path, block.start_line)
        if html_out:
            adapter = HtmlRenderAdapter(backend)
        else:
            adapter = ConsoleRenderAdapter(
                backend,
                console=console,
                interactive=getattr(args, "interactive", False),
                title=f"{backend.name} (line {block.start_line})",
            )
        BlockPipeline(backend, adapter).process(block.source)
        if html_out:
            fragments.append(adapter.fragments[-1])

    if html_out:
        Path(html_out).write_text(replace_blocks(text, blocks, fragments), encoding="utf-8")
        print(f"Wrote {len(fragments)} rendered block(s) to {html_out}")
    return 0
