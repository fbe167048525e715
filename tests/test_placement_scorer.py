"""
Tests for volume-driven cell scoring.
"""

import pytest

from slotting.models import AxisConstraint, Product, ScoringWeights, WarehouseLayout
from slotting.optimization import PlacementScorer, compute_optimal_cell, rank_cells
from slotting.optimization.placement_scorer import RANKING_COLUMNS, target_row
from slotting.utils.error_handler import NoCandidateError

from conftest import stock


def product(volume, product_id="new", popularity=10):
    return Product(product_id=product_id, name="New product", volume=volume,
                   popularity_score=popularity)


def fill_except(layout, empty):
    """Occupy every cell except the given (level, row, column) triples"""
    coordinates = [c.coordinates for c in layout.cells if c.coordinates not in empty]
    stock(layout, coordinates, volume=10, prefix="F")


class TestTargetRow:

    def test_full_volume_targets_front_row(self, grid):
        assert target_row(grid, product(100)) == pytest.approx(0.0)

    def test_tiny_volume_targets_back_row(self, grid):
        assert target_row(grid, product(1)) == pytest.approx(7 * 0.99)


class TestComputeOptimalCell:

    def test_large_product_goes_to_front_row(self, grid):
        cell = compute_optimal_cell(grid, product(95))
        assert cell.coordinates == (0, 0, 0)
        assert cell.cell_id == "1-1-L1"

    def test_small_product_goes_to_back_row(self, grid):
        cell = compute_optimal_cell(grid, product(1))
        assert cell.row == 7
        assert cell.level == 0
        assert cell.column == 0

    def test_occupied_cell_is_avoided(self, grid):
        stock(grid, [(0, 0, 0)])
        cell = compute_optimal_cell(grid, product(95))
        assert cell.cell_id == "2-1-L1"

    def test_own_cell_is_not_penalised(self, grid):
        placed = stock(grid, [(0, 0, 0)], volume=95)[0]
        assert compute_optimal_cell(grid, placed).coordinates == (0, 0, 0)

    def test_full_grid_still_returns_suggestion(self):
        layout = WarehouseLayout.create(1, 1, 2, 10)
        stock(layout, [(0, 0, 0), (0, 0, 1)], volume=5)
        cell = compute_optimal_cell(layout, product(5))
        assert cell is not None
        assert not cell.is_empty

    def test_row_constraint(self, grid):
        cell = compute_optimal_cell(grid, product(95), AxisConstraint.row(4))
        assert cell.row == 4

    def test_empty_constraint_returns_none(self, grid):
        assert compute_optimal_cell(grid, product(50), AxisConstraint.row(99)) is None

    def test_popularity_does_not_affect_choice(self, grid):
        a = compute_optimal_cell(grid, product(40, popularity=0))
        b = compute_optimal_cell(grid, product(40, popularity=100))
        assert a.cell_id == b.cell_id

    def test_equal_row_distance_prefers_lower_row(self, grid):
        # Target row 3.5 sits between rows 3 and 4
        assert compute_optimal_cell(grid, product(50)).coordinates == (0, 3, 0)

    def test_level_beats_far_column(self, grid):
        empty = {(0, 0, 11), (1, 0, 0)}
        fill_except(grid, empty)
        assert compute_optimal_cell(grid, product(100)).coordinates == (0, 0, 11)

    def test_row_distance_beats_level_and_column(self, grid):
        empty = {(2, 0, 11), (0, 1, 0)}
        fill_except(grid, empty)
        assert compute_optimal_cell(grid, product(95)).coordinates == (2, 0, 11)

    def test_deterministic(self, grid):
        stock(grid, [(0, 3, 2), (1, 4, 0)])
        first = compute_optimal_cell(grid, product(60))
        for _ in range(5):
            assert compute_optimal_cell(grid, product(60)).cell_id == first.cell_id


class TestRankCells:

    def test_columns_and_length(self, grid):
        ranking = rank_cells(grid, product(50))
        assert list(ranking.columns) == RANKING_COLUMNS
        assert len(ranking) == len(grid.cells)

    def test_sorted_by_row_distance(self, grid):
        ranking = rank_cells(grid, product(50))
        assert ranking["row_distance"].is_monotonic_increasing

    def test_tie_order(self, grid):
        ranking = rank_cells(grid, product(100))
        assert list(ranking["cell_id"].iloc[:3]) == ["1-1-L1", "2-1-L1", "3-1-L1"]
        # After the front row of level 0 comes the front row of level 1
        assert ranking.iloc[12]["cell_id"] == "1-1-L2"

    def test_occupied_cells_rank_last(self, grid):
        stock(grid, [(0, 0, 0), (2, 7, 11)])
        ranking = rank_cells(grid, product(50))
        assert list(ranking['occupied'].iloc[-2:]) == [True, True]
        assert not ranking['occupied'].iloc[:-2].any()

    def test_empty_constraint(self, grid):
        ranking = rank_cells(grid, product(50), AxisConstraint.column(40))
        assert ranking.empty
        assert list(ranking.columns) == RANKING_COLUMNS


class TestPlacementScorer:

    def test_optimize_reports_best_cell(self, grid):
        result = PlacementScorer(grid).optimize(product(95))
        assert result.success
        assert result.cell.cell_id == "1-1-L1"
        assert not result.placed
        assert grid.cell_at(0, 0, 0).is_empty

    def test_optimize_without_candidates(self, grid):
        result = PlacementScorer(grid).optimize(product(50), AxisConstraint.row(42))
        assert not result.success
        assert isinstance(result.error, NoCandidateError)

    def test_optimize_warns_when_everything_is_occupied(self):
        layout = WarehouseLayout.create(1, 1, 1, 10)
        stock(layout, [(0, 0, 0)], volume=5)
        result = PlacementScorer(layout).optimize(product(5))
        assert result.success
        assert result.cell_is_occupied
        assert result.warnings

    def test_weights_only_change_reported_score(self, grid):
        default = PlacementScorer(grid).optimize(product(95))
        skewed = PlacementScorer(grid, ScoringWeights(row=1, level=1000, column=50)).optimize(product(95))
        assert skewed.cell.cell_id == default.cell.cell_id
        assert skewed.score != default.score
