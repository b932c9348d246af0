from html import escape
from typing import Callable, List, Optional

from ..automation_api.data_models import ItemRecord
from ..automation_api.query_builder import Backend

NO_ITEMS_HTML = "<p>No items found.</p>"
RELOAD_BUTTON = (
    '<button class="taskblock-reload" title="Reload" '
    'style="border: none; background: none; cursor: pointer; float: right; font-size: 1.2em;">'
    "↻</button>"
)


class HtmlRenderAdapter:
    """
    Render a block as an HTML fragment.

    Fragments accumulate in ``fragments`` (one per render call) so a caller
    can write them into a document. The reload button is markup only; the
    page that embeds it decides how to wire it back to ``on_reload``.
    """

    def __init__(self, backend: Backend):
        self.backend = backend
        self.fragments: List[str] = []

    def render_fragment(self, items: List[ItemRecord], message: Optional[str] = None) -> str:
        parts = [f'<div class="taskblock taskblock-{self.backend.name}">', RELOAD_BUTTON]
        if message:
            parts.append(f'<p class="taskblock-message">{escape(message)}</p>')
        if not items:
            parts.append(NO_ITEMS_HTML)
        else:
            parts.append("<table>")
            parts.append("<tr><th>Task</th></tr>")
            for item in items:
                link = escape(item.deep_link(self.backend.link_template), quote=True)
                parts.append(
                    f'<tr><td><a href="{link}" style="text-decoration: none; color: inherit;">'
                    f"{escape(item.name)}</a></td></tr>"
                )
            parts.append("</table>")
        parts.append("</div>")
        return "\n".join(parts)

    def render(
        self,
        items: List[ItemRecord],
        on_reload: Callable[[], None],
        message: Optional[str] = None,
    ) -> None:
        self.fragments.append(self.render_fragment(items, message))
