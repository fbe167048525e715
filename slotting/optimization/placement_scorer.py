from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from slotting.models.cell import Cell
from slotting.models.product import Product
from slotting.models.settings import AxisConstraint, ScoringWeights
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.constants import OCCUPIED_PENALTY_MARGIN
from slotting.utils.error_handler import NoCandidateError
from slotting.utils.monitor import monitor
from .base_optimizer import BaseOptimizer, PlacementResult

RANKING_COLUMNS = ['cell_id', 'level', 'row', 'column', 'row_distance',
                   'positional_score', 'occupied', 'score']

def target_row(layout: WarehouseLayout, product: Product) -> float:
    """Row the product ideally sits in: full-capacity items go to row 0 (loading gates)"""
    ratio = min(max(product.volume_ratio(layout.cell_capacity), 0.0), 1.0)
    return (layout.rows - 1) * (1.0 - ratio)

def _score_candidates(layout: WarehouseLayout,
                      product: Product,
                      axis_constraint: Optional[AxisConstraint],
                      weights: ScoringWeights) -> Tuple[List[Cell], np.ndarray, dict]:
    """Rank every candidate cell; returns the candidates, the ranking order and the score terms"""
    if axis_constraint is None:
        candidates = list(layout.cells)
    else:
        candidates = [c for c in layout.cells if axis_constraint.matches(c)]

    if not candidates:
        return [], np.empty(0, dtype=int), {}

    coords = layout.coordinates(candidates)
    levels, rows, columns = coords[:, 0], coords[:, 1], coords[:, 2]

    row_distance = np.abs(rows - target_row(layout, product))
    positional = row_distance * weights.row + levels * weights.level + columns * weights.column

    occupied = np.array([
        not c.is_empty and not c.holds(product.product_id) for c in candidates
    ], dtype=bool)
    penalty = positional.max() + OCCUPIED_PENALTY_MARGIN
    score = positional + occupied * penalty

    # Empty cells first, then row distance, level, column; equal row distances prefer the lower row.
    # The weighted score does not take part in the order.
    order = np.lexsort((rows, columns, levels, np.round(row_distance, 9), occupied))

    terms = {
        'level': levels,
        'row': rows,
        'column': columns,
        'row_distance': row_distance,
        'positional_score': positional,
        'occupied': occupied,
        'score': score
    }
    return candidates, order, terms

def compute_optimal_cell(layout: WarehouseLayout,
                         product: Product,
                         axis_constraint: Optional[AxisConstraint] = None,
                         weights: Optional[ScoringWeights] = None) -> Optional[Cell]:
    """Best cell for ``product``, or None when the constraint leaves no candidate.

    The result may be occupied when every candidate is; callers decide what
    to do with it.
    """
    candidates, order, _ = _score_candidates(layout, product, axis_constraint, weights or ScoringWeights())
    if not candidates:
        return None
    return candidates[int(order[0])]

def rank_cells(layout: WarehouseLayout,
               product: Product,
               axis_constraint: Optional[AxisConstraint] = None,
               weights: Optional[ScoringWeights] = None) -> pd.DataFrame:
    """Full ranking table, best cell first"""
    candidates, order, terms = _score_candidates(layout, product, axis_constraint, weights or ScoringWeights())
    if not candidates:
        return pd.DataFrame(columns=RANKING_COLUMNS)

    df = pd.DataFrame({
        'cell_id': [c.cell_id for c in candidates],
        **terms
    })
    return df.iloc[order].reset_index(drop=True)[RANKING_COLUMNS]

class PlacementScorer(BaseOptimizer):
    """Pick the ideal cell for a product from its volume"""

    def __init__(self, layout: WarehouseLayout, weights: Optional[ScoringWeights] = None):
        super().__init__(layout)
        self.weights = weights or ScoringWeights()

    def compute_optimal_cell(self, product: Product,
                             axis_constraint: Optional[AxisConstraint] = None) -> Optional[Cell]:
        return compute_optimal_cell(self.layout, product, axis_constraint, self.weights)

    def rank(self, product: Product, axis_constraint: Optional[AxisConstraint] = None) -> pd.DataFrame:
        return rank_cells(self.layout, product, axis_constraint, self.weights)

    @monitor.time_it
    def optimize(self, product: Product, axis_constraint: Optional[AxisConstraint] = None) -> PlacementResult:
        """Score all candidates and report the winner without touching the grid"""
        candidates, order, terms = _score_candidates(self.layout, product, axis_constraint, self.weights)

        if not candidates:
            self.logger.warning(f"No candidate cell for product {product.product_id} "
                                f"under constraint {axis_constraint}")
            return PlacementResult(
                success=False,
                product=product,
                error=NoCandidateError(f"No cell matches {axis_constraint} for product {product.product_id}")
            )

        best = int(order[0])
        cell = candidates[best]
        result = PlacementResult(
            success=True,
            product=product,
            cell=cell,
            score=float(terms['score'][best])
        )
        if result.cell_is_occupied:
            result.warnings.append(f"Every candidate is occupied; {cell.cell_id} is a suggestion only")

        self.logger.debug(f"Optimal cell for {product.product_id} (volume {product.volume:g}): "
                          f"{cell.cell_id} score={result.score:.2f}")
        return result
