import pytest

from roads.models import Road, RoadCategory
from roads.selection import RoadSelection


@pytest.fixture
def selection():
    return RoadSelection()


def test_toggle_selects_then_deselects(selection, garratt_lane):
    assert selection.toggle(garratt_lane) is True
    assert selection.is_selected(garratt_lane.id)

    assert selection.toggle(garratt_lane) is False
    assert not selection.is_selected(garratt_lane.id)
    assert len(selection) == 0


def test_summary_totals_length_per_category(selection, garratt_lane, battersea_park_road):
    trinity_road = Road.new(
        way_id=4255003,
        coordinates=[(51.4450, -0.1780), (51.4480, -0.1770)],
        category=RoadCategory.SECONDARY,
        name="Trinity Road",
    )
    for road in (garratt_lane, battersea_park_road, trinity_road):
        selection.toggle(road)

    summary = selection.summary()

    assert summary.count == 3
    assert summary.total_length_km == pytest.approx(
        garratt_lane.length_km + battersea_park_road.length_km + trinity_road.length_km
    )
    assert summary.by_category[RoadCategory.PRIMARY] == pytest.approx(battersea_park_road.length_km)
    assert summary.by_category[RoadCategory.SECONDARY] == pytest.approx(
        garratt_lane.length_km + trinity_road.length_km
    )


def test_empty_selection_summary(selection):
    summary = selection.summary()
    assert summary.count == 0
    assert summary.total_length_km == 0
    assert summary.by_category == {}
    assert selection.focus_bounds() is None


def test_focus_bounds_pads_last_touched_road(selection, garratt_lane):
    selection.toggle(garratt_lane)

    box = selection.focus_bounds()

    assert box.south_lat == pytest.approx(51.450)
    assert box.west_lng == pytest.approx(-0.200)
    assert box.north_lat == pytest.approx(51.462)
    assert box.east_lng == pytest.approx(-0.188)


def test_clear_forgets_everything(selection, garratt_lane):
    selection.toggle(garratt_lane)
    selection.clear()

    assert selection.roads() == []
    assert selection.last_touched is None
