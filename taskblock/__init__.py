"""
taskblock: render markdown task blocks from macOS task managers.

A block is a fenced code block such as ```things or ```omnifocus holding
``key: value`` lines. Each block is turned into a JXA query, run through
``osascript``, and drawn as a table of open items with a reload control.
"""

__version__ = "1.0.0"
__author__ = "taskblock contributors"

__all__ = ["__version__"]
