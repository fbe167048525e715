from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell
from .product import Product
from slotting.utils.error_handler import InvariantViolation, ValidationError

@dataclass
class WarehouseLayout:
    """Warehouse grid: levels x rows x columns of fixed-capacity cells.

    Cells are kept ordered by (level, row, column). The layout owns two
    indexes next to the cell list: coordinates -> cell and
    product_id -> cell_id. ``set_occupant`` is the only primitive that
    touches occupancy, so both indexes always mirror the cells.
    """
    levels: int
    rows: int
    columns: int
    cell_capacity: float
    cells: List[Cell] = field(default_factory=list)

    def __post_init__(self):
        self.cells = sorted(self.cells, key=lambda c: c.coordinates)
        self._by_id: Dict[str, Cell] = {}
        self._by_coordinates: Dict[Tuple[int, int, int], Cell] = {}
        self._product_index: Dict[str, str] = {}

        for cell in self.cells:
            if not self.in_bounds(cell.level, cell.row, cell.column):
                raise ValidationError(f"Cell {cell.cell_id} lies outside a "
                                      f"{self.levels}x{self.rows}x{self.columns} grid")
            if cell.coordinates in self._by_coordinates or cell.cell_id in self._by_id:
                raise ValidationError(f"Duplicate cell at {cell.coordinates}")
            self._by_id[cell.cell_id] = cell
            self._by_coordinates[cell.coordinates] = cell

            if cell.product_id is not None:
                if cell.product_id in self._product_index:
                    raise InvariantViolation(
                        f"Product {cell.product_id} occupies both "
                        f"{self._product_index[cell.product_id]} and {cell.cell_id}")
                self._product_index[cell.product_id] = cell.cell_id

        expected = self.levels * self.rows * self.columns
        if len(self.cells) != expected:
            raise ValidationError(f"Grid needs {expected} cells, got {len(self.cells)}")

    @classmethod
    def create(cls, levels: int, rows: int, columns: int, cell_capacity: float) -> 'WarehouseLayout':
        """Create an empty grid with one cell per coordinate triple"""
        if levels <= 0 or rows <= 0 or columns <= 0:
            raise ValidationError(f"Grid extents must be positive: {levels}x{rows}x{columns}")
        if cell_capacity <= 0:
            raise ValidationError(f"Cell capacity must be positive, got {cell_capacity}")

        cells = [
            Cell(level=level, row=row, column=column)
            for level in range(levels)
            for row in range(rows)
            for column in range(columns)
        ]
        return cls(levels=levels, rows=rows, columns=columns,
                   cell_capacity=float(cell_capacity), cells=cells)

    # Lookups

    def in_bounds(self, level: int, row: int, column: int) -> bool:
        return 0 <= level < self.levels and 0 <= row < self.rows and 0 <= column < self.columns

    def cell_at(self, level: int, row: int, column: int) -> Optional[Cell]:
        return self._by_coordinates.get((level, row, column))

    def get_cell(self, cell_id: str) -> Optional[Cell]:
        return self._by_id.get(cell_id)

    def cell_holding(self, product_id: str) -> Optional[Cell]:
        cell_id = self._product_index.get(product_id)
        if cell_id is None:
            return None
        return self._by_id[cell_id]

    def empty_cells(self) -> List[Cell]:
        return [c for c in self.cells if c.is_empty]

    def occupied_cells(self) -> List[Cell]:
        return [c for c in self.cells if not c.is_empty]

    @property
    def occupancy_rate(self) -> float:
        if not self.cells:
            return 0.0
        return len(self._product_index) / len(self.cells)

    @staticmethod
    def coordinates(cells: Iterable[Cell]) -> np.ndarray:
        """(n, 3) integer array of (level, row, column)"""
        coords = [c.coordinates for c in cells]
        if not coords:
            return np.empty((0, 3), dtype=int)
        return np.array(coords, dtype=int)

    # Mutations

    def _require_cell(self, cell_id: str) -> Cell:
        cell = self._by_id.get(cell_id)
        if cell is None:
            raise InvariantViolation(f"Unknown cell {cell_id}")
        return cell

    def set_occupant(self, cell_id: str, product_id: Optional[str]):
        """Set or clear the product of one cell.

        Callers clear the previous cell of a product before assigning it
        elsewhere; assigning a product that still sits in another cell fails.
        """
        cell = self._require_cell(cell_id)

        if product_id is not None:
            holder = self._product_index.get(product_id)
            if holder is not None and holder != cell_id:
                raise InvariantViolation(
                    f"Product {product_id} is still in {holder}; clear it before setting {cell_id}")

        if cell.product_id is not None:
            self._product_index.pop(cell.product_id, None)
        cell.product_id = product_id
        if product_id is not None:
            self._product_index[product_id] = cell_id

    def place(self, product: Product, cell: Cell) -> 'WarehouseLayout':
        """Put a product into an empty cell"""
        target = self._require_cell(cell.cell_id)

        if not product.fits(self.cell_capacity):
            raise InvariantViolation(
                f"Product {product.product_id} volume {product.volume:g} does not fit "
                f"capacity {self.cell_capacity:g}")
        if target.product_id is not None and target.product_id != product.product_id:
            raise InvariantViolation(
                f"Cell {target.cell_id} already holds product {target.product_id}")
        holder = self.cell_holding(product.product_id)
        if holder is not None and holder.cell_id != target.cell_id:
            raise InvariantViolation(
                f"Product {product.product_id} is already placed in {holder.cell_id}")

        self.set_occupant(target.cell_id, product.product_id)
        return self

    def move(self, from_cell: Cell, to_cell: Cell) -> 'WarehouseLayout':
        """Direct single-cell move of the product in ``from_cell``"""
        source = self._require_cell(from_cell.cell_id)
        target = self._require_cell(to_cell.cell_id)

        if source.product_id is None:
            raise InvariantViolation(f"Cell {source.cell_id} holds no product to move")
        if source.cell_id == target.cell_id:
            raise InvariantViolation(f"Cannot move cell {source.cell_id} onto itself")
        if target.product_id is not None:
            raise InvariantViolation(
                f"Cell {target.cell_id} already holds product {target.product_id}")

        product_id = source.product_id
        self.set_occupant(source.cell_id, None)
        self.set_occupant(target.cell_id, product_id)
        return self

    def apply_assignments(self, assignments: Dict[str, Optional[str]]) -> 'WarehouseLayout':
        """Apply several occupant changes as one transition.

        The resulting occupancy is checked first; if any product would end
        up in two cells nothing is changed.
        """
        for cell_id in assignments:
            self._require_cell(cell_id)

        final: Dict[str, Optional[str]] = {
            c.cell_id: c.product_id for c in self.cells
        }
        final.update(assignments)

        seen: Dict[str, str] = {}
        for cell_id, product_id in final.items():
            if product_id is None:
                continue
            if product_id in seen:
                raise InvariantViolation(
                    f"Product {product_id} would occupy both {seen[product_id]} and {cell_id}")
            seen[product_id] = cell_id

        for cell_id in assignments:
            self.set_occupant(cell_id, None)
        for cell_id, product_id in assignments.items():
            if product_id is not None:
                self.set_occupant(cell_id, product_id)
        return self

    def check_invariants(self) -> List[str]:
        """Return every broken grid invariant (empty when consistent)"""
        issues = []

        expected = self.levels * self.rows * self.columns
        if len(self.cells) != expected:
            issues.append(f"Grid has {len(self.cells)} cells, expected {expected}")

        seen: Dict[str, str] = {}
        for cell in self.cells:
            if cell.product_id is None:
                continue
            if cell.product_id in seen:
                issues.append(f"Product {cell.product_id} occupies {seen[cell.product_id]} and {cell.cell_id}")
            seen[cell.product_id] = cell.cell_id
            if self._product_index.get(cell.product_id) != cell.cell_id:
                issues.append(f"Index out of sync for product {cell.product_id}")

        if len(seen) != len(self._product_index):
            issues.append("Product index holds stale entries")
        return issues

    def occupancy_snapshot(self) -> Dict[str, Optional[str]]:
        return {c.cell_id: c.product_id for c in self.cells}

    def to_dict(self) -> Dict:
        return {
            'levels': self.levels,
            'rows': self.rows,
            'columns': self.columns,
            'cell_capacity': self.cell_capacity,
            'cells': [c.to_dict() for c in self.cells]
        }
