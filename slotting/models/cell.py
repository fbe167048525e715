from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from slotting.utils.constants import LEVEL_PREFIX

def make_cell_id(level: int, row: int, column: int) -> str:
    """Build the location key used by listing files (1-based, column first)"""
    return f"{column + 1}-{row + 1}-{LEVEL_PREFIX}{level + 1}"

def parse_location(location: str) -> Optional[Tuple[int, int, int]]:
    """Split a ``column-row-L<level>`` location into 0-based (level, row, column)"""
    parts = str(location).strip().split('-')
    if len(parts) < 3:
        return None

    column_str, row_str, level_str = parts[0], parts[1], parts[2]
    level_str = level_str.upper()
    if level_str.startswith(LEVEL_PREFIX):
        level_str = level_str[len(LEVEL_PREFIX):]

    try:
        level = int(level_str) - 1
        row = int(row_str) - 1
        column = int(column_str) - 1
    except ValueError:
        return None

    if level < 0 or row < 0 or column < 0:
        return None
    return level, row, column

@dataclass
class Cell:
    """One storage slot of the warehouse grid"""
    level: int
    row: int
    column: int

    # Weak reference to the occupying product
    product_id: Optional[str] = None

    cell_id: Optional[str] = None
    name: Optional[str] = None

    # Everything the listing put in this location, occupant or not
    initial_product_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.cell_id:
            self.cell_id = make_cell_id(self.level, self.row, self.column)
        if not self.name:
            self.name = self.cell_id

    @property
    def coordinates(self) -> Tuple[int, int, int]:
        return (self.level, self.row, self.column)

    @property
    def is_empty(self) -> bool:
        return self.product_id is None

    def holds(self, product_id: Optional[str]) -> bool:
        return product_id is not None and self.product_id == product_id

    def label(self) -> str:
        """Human readable position, 1-based like the listing"""
        return f"Level {self.level + 1}, Row {self.row + 1}, Column {self.column + 1}"

    def to_dict(self):
        return {
            'cell_id': self.cell_id,
            'name': self.name,
            'level': self.level,
            'row': self.row,
            'column': self.column,
            'product_id': self.product_id
        }
