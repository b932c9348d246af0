import json
import logging
import os
import subprocess

import pytest

from taskblock.automation_api import jxa_client
from taskblock.automation_api.data_models import ItemRecord, NotFound
from taskblock.automation_api.jxa_client import (
    AutomationExecutionError,
    execute_jxa,
    fetch_items,
    parse_item_payload,
)

SCRIPT = "(() => JSON.stringify([]))();"


def test_default_path_uses_temp_file(fake_osascript):
    fake_osascript.stdout = "  OK \n"
    assert execute_jxa(SCRIPT) == "OK"

    call = fake_osascript.calls[0]
    assert call.cmd[:3] == ["osascript", "-l", "JavaScript"]
    assert "-e" not in call.cmd
    assert call.script == SCRIPT
    name = os.path.basename(call.path)
    assert name.startswith("taskblock-") and name.endswith(".js")
    assert not os.path.exists(call.path)


def test_temp_files_are_unique(fake_osascript):
    execute_jxa(SCRIPT)
    execute_jxa(SCRIPT)
    first, second = (c.path for c in fake_osascript.calls)
    assert first != second


def test_inline_flag_passes_script_with_e(fake_osascript):
    execute_jxa(SCRIPT, inline=True)
    assert fake_osascript.calls[0].cmd == ["osascript", "-l", "JavaScript", "-e", SCRIPT]


def test_inline_threshold_from_env(fake_osascript, monkeypatch):
    monkeypatch.setenv("TASKBLOCK_INLINE_MAX_CHARS", str(len(SCRIPT)))
    execute_jxa(SCRIPT)
    execute_jxa(SCRIPT + " ")
    assert "-e" in fake_osascript.calls[0].cmd
    assert "-e" not in fake_osascript.calls[1].cmd


def test_interpreter_and_timeout_from_env(fake_osascript, monkeypatch):
    monkeypatch.setenv("TASKBLOCK_OSASCRIPT", "/usr/local/bin/osascript")
    monkeypatch.setenv("TASKBLOCK_TIMEOUT", "12.5")
    execute_jxa(SCRIPT)
    call = fake_osascript.calls[0]
    assert call.cmd[0] == "/usr/local/bin/osascript"
    assert call.timeout == 12.5


def test_non_zero_exit_raises_and_cleans_up(fake_osascript):
    fake_osascript.returncode = 1
    fake_osascript.stderr = "execution error: Error: Application isn't running. (-600)\n"
    with pytest.raises(AutomationExecutionError, match=r"code 1.*-600"):
        execute_jxa(SCRIPT)
    assert not os.path.exists(fake_osascript.calls[0].path)


def test_timeout_raises_and_cleans_up(fake_osascript):
    fake_osascript.raises = subprocess.TimeoutExpired(cmd="osascript", timeout=1)
    with pytest.raises(AutomationExecutionError, match="timed out"):
        execute_jxa(SCRIPT, timeout=1)
    assert not os.path.exists(fake_osascript.calls[0].path)


def test_missing_interpreter(fake_osascript):
    fake_osascript.raises = FileNotFoundError("osascript")
    with pytest.raises(AutomationExecutionError, match="not found"):
        execute_jxa(SCRIPT)


def test_failed_delete_is_logged_not_raised(fake_osascript, monkeypatch, caplog):
    def _refuse(path):
        raise PermissionError("read-only")

    monkeypatch.setattr(jxa_client.os, "remove", _refuse)
    with caplog.at_level(logging.WARNING):
        assert execute_jxa(SCRIPT) == "[]"
    assert "Failed to delete temp script" in caplog.text
    monkeypatch.undo()
    os.remove(fake_osascript.calls[0].path)


def test_keep_scripts(fake_osascript, monkeypatch):
    monkeypatch.setenv("TASKBLOCK_KEEP_SCRIPTS", "1")
    execute_jxa(SCRIPT)
    path = fake_osascript.calls[0].path
    assert os.path.exists(path)
    os.remove(path)


def test_parse_item_payload_items():
    raw = json.dumps([{"id": "A1", "name": "Buy milk", "extra": True}, {"id": 42, "name": "Answer"}])
    result = parse_item_payload(raw)
    assert result.ok
    assert result.items == [ItemRecord(id="A1", name="Buy milk"), ItemRecord(id="42", name="Answer")]


def test_parse_item_payload_not_found():
    result = parse_item_payload('{"notFound": {"kind": "project", "name": "Groceries"}}')
    assert result.items == []
    assert result.not_found == NotFound(kind="project", name="Groceries")
    assert result.not_found.message() == "Project not found: Groceries"
    assert not result.ok


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "Project not found: Groceries",
        '"just a string"',
        '{"items": []}',
        '[{"id": "A1"}]',
        '[{"id": null, "name": "x"}]',
        '[{"id": "  ", "name": "x"}]',
    ],
)
def test_parse_item_payload_rejects(raw):
    with pytest.raises(ValueError):
        parse_item_payload(raw)


def test_fetch_items_success_keeps_order(fake_osascript):
    records = [{"id": str(i), "name": f"Task {i}"} for i in (3, 1, 2)]
    fake_osascript.stdout = json.dumps(records) + "\n"
    result = fetch_items(SCRIPT)
    assert [item.id for item in result.items] == ["3", "1", "2"]
    assert result.ok


def test_fetch_items_non_zero_exit_returns_empty(fake_osascript, caplog):
    fake_osascript.returncode = 1
    fake_osascript.stderr = "boom"
    with caplog.at_level(logging.ERROR):
        result = fetch_items(SCRIPT)
    assert result.items == []
    assert "boom" in result.error
    assert "Failed to retrieve items" in caplog.text


def test_fetch_items_malformed_json_returns_empty(fake_osascript, caplog):
    fake_osascript.stdout = "{not json"
    with caplog.at_level(logging.ERROR):
        result = fetch_items(SCRIPT)
    assert result.items == []
    assert result.error.startswith("Malformed JXA output")
    assert "Failed to parse JXA output" in caplog.text


def test_fetch_items_not_found_is_logged(fake_osascript, caplog):
    fake_osascript.stdout = '{"notFound": {"kind": "area", "name": "Home, Work"}}'
    with caplog.at_level(logging.WARNING):
        result = fetch_items(SCRIPT)
    assert result.not_found.message() == "Area not found: Home, Work"
    assert result.error is None
    assert "Area not found" in caplog.text


def test_fetch_items_missing_interpreter_returns_empty(fake_osascript):
    fake_osascript.raises = FileNotFoundError("osascript")
    assert fetch_items(SCRIPT).items == []


def test_unwritable_temp_dir_returns_empty(fake_osascript, monkeypatch, tmp_path):
    monkeypatch.setattr(jxa_client.tempfile, "tempdir", str(tmp_path / "missing"))
    result = fetch_items(SCRIPT)
    assert result.items == []
    assert result.error.startswith("Could not write temp script")
    assert fake_osascript.calls == []


def test_temp_file_creation_error_returns_empty(fake_osascript, monkeypatch):
    def _disk_full(*args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(jxa_client.tempfile, "NamedTemporaryFile", _disk_full)
    with pytest.raises(AutomationExecutionError, match="No space left"):
        execute_jxa(SCRIPT)
    result = fetch_items(SCRIPT)
    assert result.items == []
    assert "No space left" in result.error
    assert fake_osascript.calls == []


def test_partial_write_is_removed(fake_osascript, monkeypatch, tmp_path):
    real = jxa_client.tempfile.NamedTemporaryFile

    def _failing_write(*args, **kwargs):
        tmp_file = real(*args, dir=str(tmp_path), **kwargs)

        def write(data):
            raise OSError(28, "No space left on device")

        tmp_file.write = write
        return tmp_file

    monkeypatch.setattr(jxa_client.tempfile, "NamedTemporaryFile", _failing_write)
    assert fetch_items(SCRIPT).items == []
    assert list(tmp_path.iterdir()) == []
    assert fake_osascript.calls == []
