from .product import Product
from .cell import Cell, make_cell_id, parse_location
from .settings import (
    Axis, AxisConstraint, DistanceMetric, MoveTarget, RelocationMode,
    ScoringWeights, Settings
)
from .warehouse import WarehouseLayout

__all__ = ['Product', 'Cell', 'make_cell_id', 'parse_location', 'Axis', 'AxisConstraint',
           'DistanceMetric', 'MoveTarget', 'RelocationMode', 'ScoringWeights', 'Settings',
           'WarehouseLayout']
