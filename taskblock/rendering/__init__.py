"""
Render adapters: draw one block's items plus a reload control.
"""

from .console import NO_ITEMS, ConsoleRenderAdapter
from .html import HtmlRenderAdapter

__all__ = ["NO_ITEMS", "ConsoleRenderAdapter", "HtmlRenderAdapter"]
