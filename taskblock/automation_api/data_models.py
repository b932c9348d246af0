"""
Data models for items returned by the task managers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from urllib.parse import quote


class ItemType(str, Enum):
    task = "task"
    project = "project"


@dataclass(frozen=True)
class ItemRecord:
    id: str
    name: str

    def deep_link(self, link_template: str) -> str:
        """Build the application URI that opens this item."""
        return link_template.format(id=quote(self.id, safe="-._~"))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
        }


@dataclass(frozen=True)
class NotFound:
    kind: str  # "project" or "area"
    name: str

    def message(self) -> str:
        return f"{self.kind.title()} not found: {self.name}"


@dataclass
class ItemQueryResult:
    """Outcome of one query against the automation bridge.

    ``items`` is always a list; it is empty when the lookup failed
    (``not_found``) or the bridge call failed (``error``).
    """

    items: List[ItemRecord] = field(default_factory=list)
    not_found: Optional[NotFound] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.not_found is None and self.error is None

    @classmethod
    def failed(cls, error: str) -> "ItemQueryResult":
        return cls(items=[], error=error)
