"""
Find task blocks in markdown text.

A block is a fenced code block whose info string starts with a backend name:

    ```things
    tags: errand
    ```
"""

import re
from dataclasses import dataclass
from typing import Iterable, List

_FENCE_OPEN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})\s*(?P<info>[^\n]*)$")


@dataclass(frozen=True)
class Block:
    language: str
    source: str
    start_line: int  # 1-based line of the opening fence
    end_line: int  # 1-based line of the closing fence (last line if unterminated)


def _closes(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(line) - len(line.lstrip(" ")) <= 3
        and stripped.startswith(fence[0] * len(fence))
        and set(stripped) == {fence[0]}
    )


def find_blocks(text: str, languages: Iterable[str] = ("things", "omnifocus")) -> List[Block]:
    """Return the blocks in *text* whose language is one of *languages*, in document order.

    An unterminated fence runs to the end of the document.
    """
    wanted = {lang.lower() for lang in languages}
    lines = text.splitlines()
    blocks: List[Block] = []
    i = 0
    while i < len(lines):
        match = _FENCE_OPEN.match(lines[i])
        if not match:
            i += 1
            continue
        fence = match.group("fence")
        info = match.group("info").strip()
        language = info.split()[0].lower() if info else ""
        body: List[str] = []
        j = i + 1
        while j < len(lines) and not _closes(lines[j], fence):
            body.append(lines[j])
            j += 1
        if language in wanted:
            blocks.append(
                Block(
                    language=language,
                    source="\n".join(body),
                    start_line=i + 1,
                    end_line=min(j + 1, len(lines)),
                )
            )
        i = j + 1
    return blocks
