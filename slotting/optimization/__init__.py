from .base_optimizer import BaseOptimizer, PlacementResult, ShiftResult
from .placement_scorer import PlacementScorer, compute_optimal_cell, rank_cells
from .zone_classifier import ZoneClassifier, classify_move_targets
from .chain_shift import ChainShiftPathfinder, attempt_chain_shift

__all__ = ['BaseOptimizer', 'PlacementResult', 'ShiftResult', 'PlacementScorer',
           'compute_optimal_cell', 'rank_cells', 'ZoneClassifier', 'classify_move_targets',
           'ChainShiftPathfinder', 'attempt_chain_shift']
