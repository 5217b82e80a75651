"""Tests for the two-phase item normalization pipeline."""

import pytest

from monday_items.services.monday.core import (
    NormalizedBatch,
    aggregate_batch,
    normalize,
    normalize_batch,
    normalize_items,
)

from factories import (
    FakeFetcher,
    LINK_SETTINGS,
    linked_item,
    raw_column,
    raw_item,
    raw_subitem,
)


class TestNormalize:
    def test_wire_shape(self, linked_raw_item):
        dumped = normalize(linked_raw_item).model_dump(mode="json")
        assert {
            "id",
            "name",
            "email",
            "created_at",
            "updated_at",
            "state",
            "board",
            "creator_id",
            "group",
            "column_values",
            "mappable_column_values",
            "assets",
            "parent_item",
            "subitems",
        } == set(dumped)
        assert dumped["id"] == "123"
        assert dumped["email"] == "123@example.com"
        assert dumped["group"]["title"] == "Group"
        assert dumped["column_values"][0]["title"] == "Link Col"
        assert dumped["column_values"][0]["linked_item_ids"] == ["42"]

    def test_parent_fields_only(self, linked_raw_item):
        dumped = normalize(linked_raw_item).model_dump(mode="json")
        parent = dumped["parent_item"]
        assert parent["id"] == "P1"
        assert parent["column_values"][0]["text"] == "Parent Text"
        assert "mappable_column_values" not in parent
        assert "subitems" not in parent
        assert "assets" not in parent

    def test_parent_omitted_when_absent(self, rollup_raw_item):
        dumped = normalize(rollup_raw_item).model_dump(mode="json")
        assert "parent_item" not in dumped

    def test_subitems_are_mapped(self, rollup_raw_item):
        item = normalize(rollup_raw_item)
        assert [s.id for s in item.subitems] == ["si1", "si2"]
        sub = item.subitems[0].model_dump(mode="json")
        assert sub["mappable_column_values"] == {"n_meros_1__1": "5"}
        assert "email" not in sub
        assert "subitems" not in sub

    def test_missing_optional_parts(self):
        item = normalize({"id": 5, "name": "Bare"})
        assert item.id == "5"
        assert item.column_values == []
        assert item.mappable_column_values == {}
        assert item.subitems == []
        assert item.assets == []
        assert item.parent_item is None

    def test_malformed_column_value_never_raises(self):
        item = normalize(
            raw_item(
                "1",
                column_values=[
                    raw_column("a", value="{broken", text="txt", settings_str="{also broken"),
                    raw_column("b", value=None, settings_str=None),
                ],
            )
        )
        assert item.column_values[0].text == "txt"
        assert item.mappable_column_values["a"] == "txt"
        assert item.mappable_column_values["b"] is None


@pytest.mark.asyncio
class TestAggregateBatch:
    async def test_shared_foreign_id_fetched_once(self):
        fetcher = FakeFetcher(
            items=[linked_item("7", column_values=[{"id": "price", "text": "4"}])]
        )
        raws = [
            raw_item("1", column_values=[raw_column("link", settings_str=LINK_SETTINGS, linked_item_ids=["7"])]),
            raw_item("2", column_values=[raw_column("link", settings_str=LINK_SETTINGS, linked_item_ids=["7"])]),
        ]
        items = await aggregate_batch(normalize_batch(raws), fetcher)
        assert fetcher.calls == [["7"]]
        assert [i.column_values[0].text for i in items] == ["4", "4"]

    async def test_no_links_no_fetch(self, rollup_raw_item):
        fetcher = FakeFetcher()
        items = await aggregate_batch(normalize_batch([rollup_raw_item]), fetcher)
        assert fetcher.calls == []
        assert items[0].column_values[0].text == "5, 15"

    async def test_scenario_from_item_get(self, linked_raw_item):
        fetcher = FakeFetcher(
            items=[linked_item("42", name="Linked Name", column_values=[{"id": "price", "text": "10", "value": '"10"'}])]
        )
        items = await normalize_items([linked_raw_item], fetcher)
        assert fetcher.calls == [["42"]]
        link = items[0].model_dump(mode="json")["column_values"][0]
        assert link["text"] == "10"
        assert link["value"] == '"10"'

    async def test_payload_only_links_are_fetched(self):
        fetcher = FakeFetcher()
        raws = [
            raw_item(
                "1",
                column_values=[raw_column("link", value='{"linkedPulseIds":[{"linkedPulseId":31}]}')],
            )
        ]
        await normalize_items(raws, fetcher)
        assert fetcher.calls == [["31"]]

    async def test_fetch_failure_propagates(self, linked_raw_item):
        fetcher = FakeFetcher(error=ConnectionError("down"))
        with pytest.raises(ConnectionError):
            await normalize_items([linked_raw_item], fetcher)

    async def test_requires_normalized_batch(self, linked_raw_item):
        with pytest.raises(TypeError):
            await aggregate_batch([normalize(linked_raw_item)], FakeFetcher())

    async def test_rollup_and_linked_in_one_item(self):
        fetcher = FakeFetcher(items=[linked_item("9", column_values=[{"id": "price", "text": "1.5"}])])
        raws = [
            raw_item(
                "1",
                column_values=[
                    raw_column(
                        "total",
                        settings_str='{"relation_column":{"subelementos":true},"displayed_linked_columns":{"B2":["qty"]}}',
                    ),
                    raw_column("link", settings_str=LINK_SETTINGS, linked_item_ids=["9"]),
                ],
                subitems=[raw_subitem("s1", [raw_column("qty", text="2")])],
            )
        ]
        batch = normalize_batch(raws)
        assert isinstance(batch, NormalizedBatch)
        assert len(batch) == 1
        [item] = await aggregate_batch(batch, fetcher)
        assert item.column_values[0].text == "2"
        assert item.column_values[1].text == "1.5"
        assert item.column_values[1].value == '"1.5"'
