from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ItemModel(BaseModel):
    """One ``{id, name}`` record as printed by the automation script."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_to_str(cls, v):  # noqa D401
        """Accept numbers from the bridge but never nulls."""
        if v is None:
            raise ValueError("must not be null")
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id must not be blank")
        return v


class NotFoundModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: Literal["project", "area"]
    name: str


class NotFoundEnvelope(BaseModel):
    """Payload returned when a named project or area does not exist."""

    model_config = ConfigDict(extra="ignore")

    not_found: NotFoundModel = Field(alias="notFound")


ItemListAdapter = TypeAdapter(List[ItemModel])
