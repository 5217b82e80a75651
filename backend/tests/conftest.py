"""
Shared pytest fixtures for the Monday items tests.
"""

import pytest

from factories import (
    FakeFetcher,
    LINK_SETTINGS,
    ROLLUP_SETTINGS,
    raw_column,
    raw_item,
    raw_subitem,
)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def rollup_raw_item():
    """Item with one rollup column over two numeric subitems."""
    return raw_item(
        "1",
        column_values=[
            raw_column("subelementos_total__1", settings_str=ROLLUP_SETTINGS, title="Total"),
        ],
        subitems=[
            raw_subitem("si1", [raw_column("n_meros_1__1", text="5", value='"5"')]),
            raw_subitem("si2", [raw_column("n_meros_1__1", text="15", value='"15"')]),
        ],
    )


@pytest.fixture
def linked_raw_item():
    """Item with a connect-boards column pointing at item 42 on board 999."""
    return raw_item(
        "123",
        column_values=[
            raw_column(
                "link",
                text=None,
                value='{"linkedPulseIds":[{"linkedPulseId":"42"}]}',
                settings_str=LINK_SETTINGS,
                title="Link Col",
                display_value="Linked Name",
                linked_item_ids=["42"],
            ),
        ],
        parent_item={
            "id": "P1",
            "name": "Parent",
            "created_at": "2024-12-31T00:00:00Z",
            "updated_at": "2025-01-01T00:00:00Z",
            "state": "active",
            "board": {"id": "999"},
            "creator_id": "1",
            "group": {"id": "group1"},
            "column_values": [
                raw_column("parent_col", text="Parent Text", value='"val"', title="Parent Col"),
            ],
        },
    )
