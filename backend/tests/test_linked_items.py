"""Tests for linked item collection and resolution."""

import pytest

from monday_items.services.monday.core import (
    LinkedItemIndex,
    collect_linked_ids,
    normalize_batch,
    resolve_linked_items,
)

from factories import FakeFetcher, linked_item, raw_column, raw_item


class TestCollectLinkedIds:
    def test_union_of_field_and_payload(self):
        batch = normalize_batch(
            [
                raw_item(
                    "1",
                    column_values=[
                        raw_column("a", linked_item_ids=["10", "11"]),
                        raw_column(
                            "b",
                            value='{"linkedPulseIds":[{"linkedPulseId":12},{"linkedPulseId":"10"}]}',
                        ),
                    ],
                )
            ]
        )
        assert collect_linked_ids(batch) == ["10", "11", "12"]

    def test_duplicates_across_items_collapse(self):
        batch = normalize_batch(
            [
                raw_item("1", column_values=[raw_column("a", linked_item_ids=["7"])]),
                raw_item("2", column_values=[raw_column("a", linked_item_ids=["7"])]),
            ]
        )
        assert collect_linked_ids(batch) == ["7"]

    def test_ignores_unparsable_and_foreign_payloads(self):
        batch = normalize_batch(
            [
                raw_item(
                    "1",
                    column_values=[
                        raw_column("a", value="not json"),
                        raw_column("b", value='{"linkedPulseIds": "nope"}'),
                        raw_column("c", value='["x"]'),
                        raw_column("d", value='{"index": 1}'),
                    ],
                )
            ]
        )
        assert collect_linked_ids(batch) == []

    def test_subitem_links_are_not_collected(self):
        batch = normalize_batch(
            [
                raw_item(
                    "1",
                    subitems=[
                        {"id": "s1", "column_values": [raw_column("a", linked_item_ids=["99"])]}
                    ],
                )
            ]
        )
        assert collect_linked_ids(batch) == []


@pytest.mark.asyncio
class TestResolveLinkedItems:
    async def test_empty_ids_skip_fetch(self):
        fetcher = FakeFetcher()
        index = await resolve_linked_items([], fetcher)
        assert fetcher.calls == []
        assert isinstance(index, LinkedItemIndex)
        assert len(index) == 0

    async def test_single_fetch_indexed_by_string_id(self):
        fetcher = FakeFetcher(items=[linked_item("7"), linked_item("8")])
        index = await resolve_linked_items(["7", "8", "7"], fetcher)
        assert fetcher.calls == [["7", "8"]]
        assert set(index) == {"7", "8"}
        assert index["7"]["name"] == "Linked 7"

    async def test_numeric_ids_from_fetch_are_stringified(self):
        async def fetch(ids):
            return [{"id": 7, "name": "Seven", "board": {"id": 1}, "column_values": []}]

        index = await resolve_linked_items(["7"], fetch)
        assert "7" in index

    async def test_fetch_failure_propagates(self):
        fetcher = FakeFetcher(error=RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            await resolve_linked_items(["1"], fetcher)

    async def test_index_is_read_only(self):
        index = await resolve_linked_items(["7"], FakeFetcher(items=[linked_item("7")]))
        with pytest.raises(TypeError):
            index["8"] = {}
