"""
Tests for the row-then-column chain shift.
"""

import pytest

from slotting.models import WarehouseLayout
from slotting.optimization import ChainShiftPathfinder, attempt_chain_shift
from slotting.optimization.chain_shift import PathfinderPhase, build_chain_path, shift_assignments
from slotting.utils.error_handler import InvariantViolation, NoPathError

from conftest import stock


class TestBuildChainPath:

    def test_rows_before_columns(self):
        layout = WarehouseLayout.create(1, 3, 3, 100)
        stock(layout, [(0, 0, 0), (0, 1, 0), (0, 2, 0), (0, 2, 1)])
        path = build_chain_path(layout.cell_at(0, 0, 0), layout.cell_at(0, 2, 2), layout)
        assert [(c.row, c.column) for c in path] == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]

    def test_stops_at_first_empty_cell(self, row_layout):
        stock(row_layout, [(0, 0, 0), (0, 0, 1)])
        path = build_chain_path(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 6), row_layout)
        assert [c.column for c in path] == [0, 1, 2]

    def test_walks_backwards(self, row_layout):
        stock(row_layout, [(0, 0, 5), (0, 0, 4)])
        path = build_chain_path(row_layout.cell_at(0, 0, 5), row_layout.cell_at(0, 0, 0), row_layout)
        assert [c.column for c in path] == [5, 4, 3]

    def test_different_levels(self, grid):
        stock(grid, [(0, 0, 0)])
        with pytest.raises(NoPathError):
            build_chain_path(grid.cell_at(0, 0, 0), grid.cell_at(1, 0, 0), grid)

    def test_same_cell(self, grid):
        stock(grid, [(0, 0, 0)])
        with pytest.raises(NoPathError):
            build_chain_path(grid.cell_at(0, 0, 0), grid.cell_at(0, 0, 0), grid)

    def test_occupied_destination_without_vacancy(self, row_layout):
        stock(row_layout, [(0, 0, c) for c in range(4)])
        with pytest.raises(NoPathError):
            build_chain_path(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 3), row_layout)

    def test_shift_assignments(self, row_layout):
        stock(row_layout, [(0, 0, 0), (0, 0, 1)])
        path = [row_layout.cell_at(0, 0, c) for c in range(3)]
        assert shift_assignments(path) == {"1-1-L1": None, "2-1-L1": "P0", "3-1-L1": "P1"}


class TestAttemptChainShift:

    def test_row_shift(self, row_layout):
        products = stock(row_layout, [(0, 0, c) for c in range(3)])
        result = attempt_chain_shift(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 3), row_layout)

        assert result.success
        assert result.shifted_products == 3
        assert row_layout.cell_at(0, 0, 0).is_empty
        for i, product in enumerate(products):
            assert row_layout.cell_holding(product.product_id).column == i + 1
        assert row_layout.check_invariants() == []

    def test_cross_level_leaves_grid_unchanged(self, grid):
        stock(grid, [(0, 0, 0)])
        before = grid.occupancy_snapshot()
        result = attempt_chain_shift(grid.cell_at(0, 0, 0), grid.cell_at(1, 0, 0), grid)

        assert not result.success
        assert isinstance(result.error, NoPathError)
        assert grid.occupancy_snapshot() == before

    def test_full_path_leaves_grid_unchanged(self, row_layout):
        stock(row_layout, [(0, 0, c) for c in range(8)])
        before = row_layout.occupancy_snapshot()
        result = attempt_chain_shift(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 7), row_layout)
        assert not result.success
        assert row_layout.occupancy_snapshot() == before

    def test_empty_source_raises(self, row_layout):
        with pytest.raises(InvariantViolation):
            attempt_chain_shift(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 3), row_layout)

    def test_unknown_destination(self, row_layout, grid):
        stock(row_layout, [(0, 0, 0)])
        result = attempt_chain_shift(row_layout.cell_at(0, 0, 0), grid.cell_at(2, 7, 11), row_layout)
        assert not result.success
        assert isinstance(result.error, NoPathError)

    def test_phase_returns_to_idle(self, row_layout):
        stock(row_layout, [(0, 0, 0)])
        pathfinder = ChainShiftPathfinder(row_layout)
        result = pathfinder.optimize(row_layout.cell_at(0, 0, 0), row_layout.cell_at(0, 0, 2))
        assert result.success
        assert pathfinder.phase is PathfinderPhase.IDLE
        assert result.get_summary()['path'] == ["1-1-L1", "2-1-L1"]
