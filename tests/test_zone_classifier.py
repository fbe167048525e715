"""
Tests for proximity zone classification.
"""

import pytest

from slotting.models import Settings, WarehouseLayout
from slotting.models.settings import DistanceMetric
from slotting.optimization import ZoneClassifier, classify_move_targets
from slotting.optimization.zone_classifier import cell_distances, classify_distance
from slotting.utils.constants import ZONE_EXCLUDED

from conftest import stock


@pytest.fixture
def settings():
    return Settings(distance_zone1=2, distance_zone2=4, distance_zone3=6)


@pytest.fixture
def long_row():
    return WarehouseLayout.create(1, 1, 10, 100)


class TestClassifyDistance:

    def test_boundaries_are_inclusive(self, settings):
        assert classify_distance(2.0, settings) == 1
        assert classify_distance(4.0, settings) == 2
        assert classify_distance(6.0, settings) == 3

    def test_bands(self, settings):
        assert classify_distance(0.0, settings) == 1
        assert classify_distance(5.0, settings) == 3
        assert classify_distance(3.5, settings) == 2
        assert classify_distance(7.0, settings) == ZONE_EXCLUDED

    def test_thresholds_2_4_6_scenario(self, settings):
        # Distance 5 lies past the zone 2 bound of 4, so it falls in zone 3
        assert [classify_distance(d, settings) for d in (2.0, 5.0, 7.0)] == [1, 3, ZONE_EXCLUDED]


class TestClassifyMoveTargets:

    def test_zones_and_exclusion(self, long_row, settings):
        ideal = long_row.cell_at(0, 0, 0)
        cells = [long_row.cell_at(0, 0, c) for c in (2, 5, 7)]
        targets = classify_move_targets(ideal, cells, settings)

        assert [(t.cell_id, t.zone) for t in targets] == [("3-1-L1", 1), ("6-1-L1", 3)]
        assert targets[0].distance == pytest.approx(2.0)

    def test_middle_zone(self, long_row, settings):
        ideal = long_row.cell_at(0, 0, 0)
        targets = classify_move_targets(ideal, [long_row.cell_at(0, 0, 3)], settings)
        assert targets[0].zone == 2

    def test_ordered_by_zone_then_distance(self, long_row, settings):
        ideal = long_row.cell_at(0, 0, 4)
        cells = [long_row.cell_at(0, 0, c) for c in (9, 0, 5, 3, 7)]
        targets = classify_move_targets(ideal, cells, settings)

        assert [t.zone for t in targets] == sorted(t.zone for t in targets)
        assert [t.cell_id for t in targets] == ["6-1-L1", "4-1-L1", "8-1-L1", "1-1-L1", "10-1-L1"]

    def test_equal_distances_keep_input_order(self, long_row, settings):
        ideal = long_row.cell_at(0, 0, 4)
        cells = [long_row.cell_at(0, 0, 5), long_row.cell_at(0, 0, 3)]
        targets = classify_move_targets(ideal, cells, settings)
        assert [t.cell_id for t in targets] == ["6-1-L1", "4-1-L1"]

    def test_occupied_and_excluded_cells_skipped(self, long_row, settings):
        stock(long_row, [(0, 0, 1)])
        ideal = long_row.cell_at(0, 0, 0)
        cells = [long_row.cell_at(0, 0, c) for c in (0, 1, 2)]
        targets = classify_move_targets(ideal, cells, settings, exclude_cell_id="1-1-L1")
        assert [t.cell_id for t in targets] == ["3-1-L1"]

    def test_idempotent_and_read_only(self, grid, settings):
        stock(grid, [(0, 0, 0), (1, 2, 3)])
        before = grid.occupancy_snapshot()
        ideal = grid.cell_at(0, 1, 1)

        first = classify_move_targets(ideal, grid.empty_cells(), settings)
        second = classify_move_targets(ideal, grid.empty_cells(), settings)
        assert first == second
        assert grid.occupancy_snapshot() == before

    def test_euclidean_across_levels(self, grid, settings):
        ideal = grid.cell_at(0, 0, 0)
        targets = classify_move_targets(ideal, [grid.cell_at(2, 0, 0)], settings)
        assert targets[0].distance == pytest.approx(2.0)

    def test_column_metric_ignores_rows_and_levels(self, grid, settings):
        ideal = grid.cell_at(0, 0, 0)
        far = grid.cell_at(2, 7, 1)
        targets = classify_move_targets(ideal, [far], settings, metric=DistanceMetric.COLUMN)
        assert targets[0].distance == pytest.approx(1.0)
        assert targets[0].zone == 1

    def test_no_cells(self, grid, settings):
        assert classify_move_targets(grid.cell_at(0, 0, 0), [], settings) == []


class TestCellDistances:

    def test_euclidean(self, grid):
        distances = cell_distances(grid.cell_at(0, 0, 0), [grid.cell_at(0, 3, 4)])
        assert distances[0] == pytest.approx(5.0)


class TestZoneClassifier:

    def test_defaults_to_empty_cells_of_layout(self, long_row, settings):
        stock(long_row, [(0, 0, 1)])
        targets = ZoneClassifier(long_row, settings).optimize(long_row.cell_at(0, 0, 0))
        ids = [t.cell_id for t in targets]
        assert "2-1-L1" not in ids
        assert ids[0] == "1-1-L1"
        assert len(ids) == 6
