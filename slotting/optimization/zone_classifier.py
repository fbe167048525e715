from typing import Iterable, List, Optional

import numpy as np

from slotting.models.cell import Cell
from slotting.models.settings import DistanceMetric, MoveTarget, Settings
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.constants import ZONE_EXCLUDED
from .base_optimizer import BaseOptimizer

def cell_distances(ideal_target: Cell, cells: List[Cell],
                   metric: DistanceMetric = DistanceMetric.EUCLIDEAN) -> np.ndarray:
    """Distance from the ideal target to each cell"""
    coords = WarehouseLayout.coordinates(cells)
    if len(coords) == 0:
        return np.empty(0, dtype=float)

    delta = coords - np.array(ideal_target.coordinates)
    if metric is DistanceMetric.COLUMN:
        return np.abs(delta[:, 2]).astype(float)
    return np.sqrt((delta ** 2).sum(axis=1))

def classify_distance(distance: float, settings: Settings) -> int:
    """Zone of a single distance; boundaries are inclusive"""
    z1, z2, z3 = settings.zone_thresholds
    if distance <= z1:
        return 1
    if distance <= z2:
        return 2
    if distance <= z3:
        return 3
    return ZONE_EXCLUDED

def classify_move_targets(ideal_target: Cell,
                          empty_cells: Iterable[Cell],
                          settings: Settings,
                          metric: Optional[DistanceMetric] = None,
                          exclude_cell_id: Optional[str] = None) -> List[MoveTarget]:
    """Bucket empty cells into proximity zones around the ideal target.

    Cells beyond the third threshold are dropped. The result is ordered by
    zone, then distance, then input order, and the grid is never modified.
    """
    metric = metric or settings.relocation_mode.metric
    cells = [
        c for c in empty_cells
        if c.is_empty and c.cell_id != exclude_cell_id
    ]
    if not cells:
        return []

    distances = cell_distances(ideal_target, cells, metric)
    z1, z2, z3 = settings.zone_thresholds
    zones = np.select(
        [distances <= z1, distances <= z2, distances <= z3],
        [1, 2, 3],
        default=ZONE_EXCLUDED
    )

    keep = np.flatnonzero(zones != ZONE_EXCLUDED)
    order = keep[np.lexsort((keep, distances[keep], zones[keep]))]
    return [
        MoveTarget(cell_id=cells[i].cell_id, zone=int(zones[i]), distance=float(distances[i]))
        for i in order
    ]

class ZoneClassifier(BaseOptimizer):
    """Rank empty cells around an ideal target into move zones"""

    def __init__(self, layout: WarehouseLayout, settings: Settings,
                 metric: Optional[DistanceMetric] = None):
        super().__init__(layout)
        self.settings = settings
        self.metric = metric or settings.relocation_mode.metric

    def optimize(self, ideal_target: Cell,
                 empty_cells: Optional[Iterable[Cell]] = None,
                 exclude_cell_id: Optional[str] = None) -> List[MoveTarget]:
        if empty_cells is None:
            empty_cells = self.layout.empty_cells()

        targets = classify_move_targets(ideal_target, empty_cells, self.settings,
                                        self.metric, exclude_cell_id)

        by_zone = {zone: sum(1 for t in targets if t.zone == zone) for zone in (1, 2, 3)}
        self.logger.debug(f"Move targets around {ideal_target.cell_id} ({self.metric.value}): "
                          f"zone1={by_zone[1]} zone2={by_zone[2]} zone3={by_zone[3]}")
        return targets
