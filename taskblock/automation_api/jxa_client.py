"""JavaScript-for-Automation execution helper for taskblock.

This module centralises running JXA programs through ``osascript -l
JavaScript`` and turning their output into :class:`ItemRecord` lists.

:pyfunc:`execute_jxa` is the low-level call: it returns *stdout* with
leading/trailing whitespace stripped and raises
:class:`AutomationExecutionError` with stderr attached on any non-zero exit.

:pyfunc:`fetch_items` is what the pipeline uses. It never raises: every
failure is logged and comes back as an empty :class:`ItemQueryResult` with
``error`` set, so a broken bridge renders as "no items" instead of crashing
the caller.
"""
from __future__ import annotations

import json
import os
import subprocess
import tempfile
import time
from typing import Final, List, Optional

from pydantic import ValidationError

from ..utils import config
from ..utils.logger import get_logger
from ..utils.payload_schema import ItemListAdapter, NotFoundEnvelope
from .data_models import ItemQueryResult, ItemRecord, NotFound

__all__: Final = [
    "AutomationExecutionError",
    "execute_jxa",
    "fetch_items",
    "parse_item_payload",
]

log = get_logger(__name__)

LANGUAGE_FLAG: Final = ("-l", "JavaScript")


class AutomationExecutionError(RuntimeError):
    """Raised when the script cannot be written or ``osascript`` fails to run it."""


def _write_temp_script(script: str) -> str:
    """Write *script* to a uniquely named temporary *.js* file and return its path."""
    stamp = int(time.time() * 1000)
    tmp_file = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        delete=False,
        prefix=f"taskblock-{stamp}-",
        suffix=".js",
    )
    try:
        tmp_file.write(script)
        tmp_file.flush()
    except OSError:
        try:
            tmp_file.close()
        finally:
            os.remove(tmp_file.name)
        raise
    tmp_file.close()
    return tmp_file.name


def _remove_temp_script(path: str) -> None:
    if config.keep_scripts():
        log.debug("Keeping script file %s", path)
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("Failed to delete temp script %s: %s", path, e)


def _use_inline(script: str, inline: Optional[bool]) -> bool:
    if inline is not None:
        return inline
    return len(script) <= config.get_inline_threshold()


def execute_jxa(script: str, inline: Optional[bool] = None, timeout: Optional[float] = None) -> str:
    """Run a JXA program and return its *stdout* as ``str``.

    Short scripts (see ``TASKBLOCK_INLINE_MAX_CHARS``) or ``inline=True`` are
    passed with ``-e``; everything else goes through a temp file that is
    removed once the process has exited, whatever the outcome.
    """
    if timeout is None:
        timeout = config.get_timeout()
    osascript = config.get_osascript_path()

    script_path = None
    if _use_inline(script, inline):
        cmd = [osascript, *LANGUAGE_FLAG, "-e", script]
    else:
        try:
            script_path = _write_temp_script(script)
        except OSError as e:
            raise AutomationExecutionError(f"Could not write temp script: {e}") from e
        cmd = [osascript, *LANGUAGE_FLAG, script_path]

    try:
        log.debug("Executing: %s -l JavaScript %s", osascript, script_path or "-e <inline script>")
        try:
            process = subprocess.run(cmd, capture_output=True, text=True, check=False, timeout=timeout)
        except FileNotFoundError as e:
            raise AutomationExecutionError(f"Automation interpreter not found: {osascript}") from e
        except subprocess.TimeoutExpired as e:
            raise AutomationExecutionError(f"JXA execution timed out after {timeout}s") from e

        if process.returncode != 0:
            raise AutomationExecutionError(
                f"JXA execution failed (code {process.returncode}): {(process.stderr or '').strip()}"
            )
        return (process.stdout or "").strip()
    finally:
        if script_path:
            _remove_temp_script(script_path)


def parse_item_payload(raw: str) -> ItemQueryResult:
    """Decode the JSON printed by a query script.

    Raises ``ValueError`` (``json.JSONDecodeError`` and pydantic's
    ``ValidationError`` are both subclasses) when the output is not one of
    the two known payload shapes.
    """
    payload = json.loads(raw)
    if isinstance(payload, list):
        models = ItemListAdapter.validate_python(payload)
        items: List[ItemRecord] = [ItemRecord(id=m.id, name=m.name) for m in models]
        return ItemQueryResult(items=items)
    if isinstance(payload, dict) and "notFound" in payload:
        envelope = NotFoundEnvelope.model_validate(payload)
        missing = NotFound(kind=envelope.not_found.kind, name=envelope.not_found.name)
        return ItemQueryResult(items=[], not_found=missing)
    raise ValueError(f"Unexpected JXA payload: {raw[:200]!r}")


def fetch_items(script: str, inline: Optional[bool] = None, timeout: Optional[float] = None) -> ItemQueryResult:
    """Run a query script and return its items; failures yield an empty result."""
    try:
        raw = execute_jxa(script, inline=inline, timeout=timeout)
    except AutomationExecutionError as e:
        log.error("Failed to retrieve items: %s", e)
        return ItemQueryResult.failed(str(e))

    log.debug("Raw JXA output: %s", raw)

    try:
        result = parse_item_payload(raw)
    except (ValueError, ValidationError) as e:
        log.error("Failed to parse JXA output: %s", e)
        return ItemQueryResult.failed(f"Malformed JXA output: {e}")

    if result.not_found:
        log.warning(result.not_found.message())
    return result
