from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from ..automation_api.data_models import ItemRecord
from ..automation_api.query_builder import Backend

NO_ITEMS = "No items found."


class ConsoleRenderAdapter:
    """Render a block as a rich table; optionally offer a reload prompt."""

    def __init__(
        self,
        backend: Backend,
        console: Optional[Console] = None,
        interactive: bool = False,
        title: Optional[str] = None,
    ):
        self.backend = backend
        self.console = console or Console()
        self.interactive = interactive
        self.title = title

    def render(
        self,
        items: List[ItemRecord],
        on_reload: Callable[[], None],
        message: Optional[str] = None,
    ) -> None:
        if self.title:
            self.console.rule(self.title)
        if message:
            self.console.print(message, style="yellow")
        if not items:
            self.console.print(NO_ITEMS)
        else:
            table = Table(show_header=True, header_style="bold")
            table.add_column("Task", style="green")
            table.add_column("Link", style="cyan", overflow="fold")
            for item in items:
                link = item.deep_link(self.backend.link_template)
                table.add_row(f"[link={link}]{escape(item.name)}[/link]", link)
            self.console.print(table)

        if self.interactive and Confirm.ask("↻ Reload?", console=self.console, default=False):
            on_reload()
