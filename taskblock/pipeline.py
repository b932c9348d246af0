"""
Block pipeline: config text -> filter spec -> JXA program -> items -> render adapter.

Nothing is kept between runs; a reload is a full re-execution of the same
source text.
"""

from typing import Callable, List, Optional, Protocol

from .automation_api.data_models import ItemQueryResult, ItemRecord
from .automation_api.jxa_client import fetch_items
from .automation_api.query_builder import Backend, build_query_script
from .automation_api.search_filters import build_filter_spec
from .block_config import parse_block_config
from .utils.logger import get_logger

log = get_logger(__name__)

Fetcher = Callable[[str], ItemQueryResult]


class RenderAdapter(Protocol):
    """Draws one block. ``on_reload`` re-runs the whole pipeline for that block."""

    def render(
        self,
        items: List[ItemRecord],
        on_reload: Callable[[], None],
        message: Optional[str] = None,
    ) -> None:
        ...


class BlockPipeline:
    def __init__(
        self,
        backend: Backend,
        adapter: Optional[RenderAdapter] = None,
        fetch: Optional[Fetcher] = None,
    ):
        self.backend = backend
        self.adapter = adapter
        self.fetch = fetch or fetch_items

    def build_script(self, source: str) -> str:
        config = parse_block_config(source)
        spec = build_filter_spec(config)
        log.debug("Filter for %s block: %s", self.backend.name, spec)
        return build_query_script(spec, self.backend)

    def query(self, source: str) -> ItemQueryResult:
        return self.fetch(self.build_script(source))

    def process(self, source: str) -> ItemQueryResult:
        """Query and hand the result to the adapter."""
        if self.adapter is None:
            raise ValueError("process() needs a render adapter")
        result = self.query(source)
        message = result.not_found.message() if result.not_found else None
        self.adapter.render(result.items, on_reload=lambda: self.process(source), message=message)
        return result
