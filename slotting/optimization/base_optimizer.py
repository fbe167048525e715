from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from slotting.models.cell import Cell
from slotting.models.product import Product
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.error_handler import SlottingError
from slotting.utils.logger import get_logger

@dataclass
class PlacementResult:
    """Outcome of a placement scoring run"""
    success: bool
    product: Product
    cell: Optional[Cell] = None
    score: Optional[float] = None
    placed: bool = False
    error: Optional[SlottingError] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def cell_is_occupied(self) -> bool:
        return self.cell is not None and not self.cell.is_empty and not self.cell.holds(self.product.product_id)

    def get_summary(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'product_id': self.product.product_id,
            'cell_id': self.cell.cell_id if self.cell else None,
            'score': self.score,
            'placed': self.placed,
            'error': str(self.error) if self.error else None,
            'warnings': len(self.warnings)
        }

@dataclass
class ShiftResult:
    """Outcome of a chain shift attempt"""
    success: bool
    layout: WarehouseLayout
    path: List[Cell] = field(default_factory=list)
    error: Optional[SlottingError] = None

    @property
    def shifted_products(self) -> int:
        return max(0, len(self.path) - 1) if self.success else 0

    def get_summary(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'path': [c.cell_id for c in self.path],
            'shifted_products': self.shifted_products,
            'error': str(self.error) if self.error else None
        }

class BaseOptimizer(ABC):
    """Base class for the slotting engine components"""

    def __init__(self, layout: WarehouseLayout):
        self.layout = layout
        self.logger = get_logger()
        self.warnings = []

    @abstractmethod
    def optimize(self, *args, **kwargs):
        """Main entry point implemented by each component"""
        pass

    def _resolve(self, cell: Cell) -> Optional[Cell]:
        """Map a cell (possibly a stale copy) onto this layout's instance"""
        if cell is None:
            return None
        return self.layout.get_cell(cell.cell_id)
