"""
Turn a parsed block config into the filter applied inside the task manager.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from ..utils.logger import get_logger
from .data_models import ItemType

log = get_logger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    item_type: ItemType = ItemType.task
    tags: Tuple[str, ...] = ()
    project: Optional[str] = None
    areas: Tuple[str, ...] = ()

    @property
    def is_unfiltered(self) -> bool:
        return not (self.tags or self.project or self.areas)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-able form read by the generated script."""
        return {
            "type": self.item_type.value,
            "tags": list(self.tags),
            "project": self.project or "",
            "areas": list(self.areas),
        }


def split_names(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated list, trimming entries and dropping blanks and repeats."""
    if not value:
        return ()
    seen = []
    for part in value.split(","):
        name = part.strip()
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)


def _merge(*groups: Iterable[str]) -> Tuple[str, ...]:
    merged = []
    for group in groups:
        for name in group:
            if name not in merged:
                merged.append(name)
    return tuple(merged)


def parse_item_type(value: Optional[str]) -> ItemType:
    if not value:
        return ItemType.task
    try:
        return ItemType(value.strip().lower())
    except ValueError:
        log.warning("Unknown item type %r, falling back to 'task'", value)
        return ItemType.task


def build_filter_spec(config: Dict[str, str]) -> FilterSpec:
    """
    Build a :class:`FilterSpec` from a block config.

    Recognised keys: ``type``, ``tags``, ``project``, ``area`` and the legacy
    ``tag`` (one tag, merged into ``tags``) and ``list-projects`` (areas or
    folders whose projects are listed; implies ``type: project`` unless a
    type is given). Anything else is ignored.
    """
    areas = _merge(split_names(config.get("area")), split_names(config.get("list-projects")))
    tags = _merge(split_names(config.get("tags")), split_names(config.get("tag")))

    if "type" in config:
        item_type = parse_item_type(config.get("type"))
    elif config.get("list-projects"):
        item_type = ItemType.project
    else:
        item_type = ItemType.task

    project = (config.get("project") or "").strip() or None
    if project and item_type is ItemType.project:
        log.warning("'project' is ignored when listing projects (project=%r)", project)
        project = None

    return FilterSpec(item_type=item_type, tags=tags, project=project, areas=areas)
