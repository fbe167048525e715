from enum import Enum
from typing import Dict, List, Optional

from slotting.models.cell import Cell
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.error_handler import InvariantViolation, NoPathError
from .base_optimizer import BaseOptimizer, ShiftResult

class PathfinderPhase(Enum):
    IDLE = "idle"
    PATH_BUILDING = "path_building"
    SHIFTING = "shifting"

def _step(current: int, goal: int) -> int:
    if goal > current:
        return 1
    if goal < current:
        return -1
    return 0

def build_chain_path(source: Cell, destination: Cell, layout: WarehouseLayout) -> List[Cell]:
    """Walk from source towards destination, rows first, then columns.

    The walk stays on the source level and stops at the destination or at
    the first empty cell it reaches. Raises NoPathError when the walk leaves
    the grid, revisits a cell or ends on an occupied cell.
    """
    if source.level != destination.level:
        raise NoPathError(f"{source.cell_id} and {destination.cell_id} are on different levels")
    if source.cell_id == destination.cell_id:
        raise NoPathError(f"Source and destination are the same cell ({source.cell_id})")

    path = [source]
    visited = {source.cell_id}
    level, row, column = source.coordinates

    while (row, column) != (destination.row, destination.column):
        if row != destination.row:
            row += _step(row, destination.row)
        else:
            column += _step(column, destination.column)

        cell = layout.cell_at(level, row, column)
        if cell is None:
            raise NoPathError(f"Walk left the grid at level {level}, row {row}, column {column}")
        if cell.cell_id in visited:
            raise NoPathError(f"Walk revisited {cell.cell_id}")

        path.append(cell)
        visited.add(cell.cell_id)
        if cell.is_empty:
            return path

    raise NoPathError(f"Destination {destination.cell_id} is occupied; nothing to shift into")

def shift_assignments(path: List[Cell]) -> Dict[str, Optional[str]]:
    """Occupants after moving each product one step along the path"""
    assignments: Dict[str, Optional[str]] = {path[0].cell_id: None}
    for previous, cell in zip(path, path[1:]):
        assignments[cell.cell_id] = previous.product_id
    return assignments

def attempt_chain_shift(source: Cell, destination: Cell, layout: WarehouseLayout) -> ShiftResult:
    """Shift every product on the walked path one step towards the vacancy.

    Path failures come back as an unsuccessful ShiftResult carrying the
    NoPathError; the grid is left untouched. An empty source cell is a
    caller bug and raises InvariantViolation.
    """
    return ChainShiftPathfinder(layout).optimize(source, destination)

class ChainShiftPathfinder(BaseOptimizer):
    """Greedy row-then-column chain shift"""

    def __init__(self, layout: WarehouseLayout):
        super().__init__(layout)
        self.phase = PathfinderPhase.IDLE

    def _enter(self, phase: PathfinderPhase):
        self.logger.debug(f"Pathfinder {self.phase.value} -> {phase.value}")
        self.phase = phase

    def optimize(self, source: Cell, destination: Cell) -> ShiftResult:
        source_cell = self._resolve(source)
        destination_cell = self._resolve(destination)

        if source_cell is None:
            raise InvariantViolation(f"Unknown source cell {source.cell_id}")
        if source_cell.is_empty:
            raise InvariantViolation(f"Source cell {source_cell.cell_id} holds no product")
        if destination_cell is None:
            return ShiftResult(success=False, layout=self.layout,
                               error=NoPathError(f"Destination {destination.cell_id} is not in the grid"))

        self._enter(PathfinderPhase.PATH_BUILDING)
        try:
            path = build_chain_path(source_cell, destination_cell, self.layout)
        except NoPathError as e:
            self.logger.info(f"No chain path from {source_cell.cell_id} to {destination_cell.cell_id}: {e}")
            self._enter(PathfinderPhase.IDLE)
            return ShiftResult(success=False, layout=self.layout, error=e)

        self._enter(PathfinderPhase.SHIFTING)
        try:
            self.layout.apply_assignments(shift_assignments(path))
        finally:
            self._enter(PathfinderPhase.IDLE)

        self.logger.info(f"Chain shift {source_cell.cell_id} -> {path[-1].cell_id}: "
                         f"{len(path) - 1} product(s) moved")
        return ShiftResult(success=True, layout=self.layout, path=path)
