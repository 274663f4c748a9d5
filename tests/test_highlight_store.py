from datetime import datetime, timezone

import pytest

from highlights import HighlightStore, NewHighlight
from roads.models import RoadCategory

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return HighlightStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def new_highlight():
    return NewHighlight(
        external_id="way/4255001",
        name="Garratt Lane",
        category=RoadCategory.SECONDARY,
        length_km=0.26,
        coordinates=((51.455, -0.195), (51.457, -0.193)),
    )


def test_save_assigns_sequential_ids_and_timestamp(store, new_highlight):
    first = store.save(new_highlight)
    second = store.save(new_highlight)

    assert (first.id, second.id) == (1, 2)
    assert first.created_at == FIXED_NOW
    assert first.name == "Garratt Lane"
    assert first.category is RoadCategory.SECONDARY
    assert len(store) == 2


def test_list_and_get_by_id(store, new_highlight):
    saved = store.save(new_highlight)

    assert store.list() == [saved]
    assert store.get_by_id(saved.id) == saved
    assert store.get_by_id(99) is None


def test_delete_reports_whether_anything_was_removed(store, new_highlight):
    saved = store.save(new_highlight)

    assert store.delete_by_id(saved.id) is True
    assert store.delete_by_id(saved.id) is False
    assert store.delete_by_id(12345) is False
    assert store.list() == []


def test_ids_are_never_reused(store, new_highlight):
    store.save(new_highlight)
    second = store.save(new_highlight)
    store.delete_by_id(second.id)

    assert store.save(new_highlight).id == 3
