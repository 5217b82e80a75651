"""
Normalized Monday item shapes.

Raw query results stay plain dicts; everything the engine hands back to
callers is one of the models below, and ``model_dump()`` yields the wire
shape consumers rely on (``column_values``, ``mappable_column_values``,
``parent_item``, ``subitems``).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, model_serializer


# Raw JSON trees straight from the query layer
RawItem = dict[str, Any]
RawColumnValue = dict[str, Any]

# Per-column programmatic view: object, string, or null (parsed scalars pass through)
MappableValue = Any


class ColumnValue(BaseModel):
    id: str | None = None
    value: Any = None
    text: str | None = None
    display_value: str | None = None
    title: str | None = None
    additional_info: str | None = None
    linked_item_ids: list[str] | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_links(self, handler):
        data = handler(self)
        if data.get("linked_item_ids") is None:
            data.pop("linked_item_ids", None)
        return data


class ItemFields(BaseModel):
    """Scalar fields shared by items, subitems and parents."""

    id: str | None = None
    name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    state: str | None = None
    board: dict[str, Any] | None = None
    creator_id: str | None = None
    group: dict[str, Any] | None = None


class ParentItem(ItemFields):
    column_values: list[ColumnValue] = []


class SubItem(ItemFields):
    column_values: list[ColumnValue] = []
    mappable_column_values: dict[str, MappableValue] = {}

    def column(self, column_id: str) -> ColumnValue | None:
        for cv in self.column_values:
            if cv.id == column_id:
                return cv
        return None


class NormalizedItem(SubItem):
    email: str | None = None
    assets: list[dict[str, Any]] = []
    parent_item: ParentItem | None = None
    subitems: list[SubItem] = []

    @model_serializer(mode="wrap")
    def _omit_missing_parent(self, handler):
        data = handler(self)
        if data.get("parent_item") is None:
            data.pop("parent_item", None)
        return data


# ============================================================================
# PIPELINE PHASES
# ============================================================================


@dataclass(frozen=True)
class NormalizedBatch:
    """
    Output of phase 1: items normalized one by one with rollups applied.

    Only ``normalize_batch`` builds these; ``aggregate_batch`` only accepts
    them, so the batch-level pass can never run on un-normalized input.
    """

    items: tuple[NormalizedItem, ...]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


class LinkedItemIndex(Mapping[str, RawItem]):
    """Read-only id -> linked item lookup, built once per batch."""

    def __init__(self, items: Mapping[str, RawItem] | None = None):
        self._items = MappingProxyType(dict(items or {}))

    def __getitem__(self, item_id: str) -> RawItem:
        return self._items[item_id]

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"LinkedItemIndex({list(self._items)!r})"
