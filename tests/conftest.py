import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskblock.automation_api.data_models import ItemQueryResult, ItemRecord


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's TASKBLOCK_* settings out of the tests."""
    for key in list(os.environ):
        if key.startswith("TASKBLOCK_"):
            monkeypatch.delenv(key, raising=False)


class FakeOsascript:
    """Stands in for ``subprocess.run``; remembers each command and the script it saw."""

    def __init__(self):
        self.returncode = 0
        self.stdout = "[]"
        self.stderr = ""
        self.raises = None
        self.calls = []

    def __call__(self, cmd, capture_output=True, text=True, check=False, timeout=None):
        script_path = cmd[-1] if "-e" not in cmd else None
        seen = Path(script_path).read_text(encoding="utf-8") if script_path else cmd[-1]
        self.calls.append(SimpleNamespace(cmd=list(cmd), script=seen, path=script_path, timeout=timeout))
        if self.raises is not None:
            raise self.raises
        return SimpleNamespace(returncode=self.returncode, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def fake_osascript(monkeypatch):
    fake = FakeOsascript()
    monkeypatch.setattr("subprocess.run", fake)
    return fake


class StubFetch:
    """A fetcher that returns a canned result and records the scripts it was given."""

    def __init__(self, result=None):
        self.result = result if result is not None else ItemQueryResult(items=[])
        self.scripts = []

    def __call__(self, script):
        self.scripts.append(script)
        return self.result


@pytest.fixture
def sample_items():
    return [
        ItemRecord(id="A1", name="Buy milk"),
        ItemRecord(id="B2", name="Call plumber"),
    ]


@pytest.fixture
def stub_fetch(sample_items):
    return StubFetch(ItemQueryResult(items=list(sample_items)))


@pytest.fixture
def make_fetch():
    return StubFetch
