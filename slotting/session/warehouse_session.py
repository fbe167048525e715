import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from slotting.models.cell import Cell
from slotting.models.product import Product
from slotting.models.settings import AxisConstraint, MoveTarget, RelocationMode, ScoringWeights, Settings
from slotting.models.warehouse import WarehouseLayout
from slotting.optimization.base_optimizer import PlacementResult
from slotting.optimization.chain_shift import ChainShiftPathfinder
from slotting.optimization.placement_scorer import PlacementScorer
from slotting.optimization.zone_classifier import ZoneClassifier
from slotting.utils.constants import MIN_PRODUCT_NAME_LENGTH
from slotting.utils.error_handler import InvariantViolation, NoPathError, ValidationError
from slotting.utils.logger import get_logger

class SessionMode(Enum):
    IDLE = "idle"
    CELL_SELECTED = "cell_selected"
    RELOCATING = "relocating"

@dataclass(frozen=True)
class SessionState:
    """Selection and in-progress move, replaced on every transition"""
    mode: SessionMode = SessionMode.IDLE
    selected_cell_id: Optional[str] = None
    suggested_cell_id: Optional[str] = None
    source_cell_id: Optional[str] = None
    ideal_cell_id: Optional[str] = None
    move_targets: Tuple[MoveTarget, ...] = ()

    @property
    def target_ids(self) -> List[str]:
        return [t.cell_id for t in self.move_targets]

    def zone_of(self, cell_id: str) -> int:
        for target in self.move_targets:
            if target.cell_id == cell_id:
                return target.zone
        return 0

@dataclass
class MoveResult:
    """Outcome of executing a relocation"""
    success: bool
    source_cell_id: Optional[str] = None
    destination_cell_id: Optional[str] = None
    chained: bool = False
    path: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

class WarehouseSession:
    """Single-user session driving the slotting engine.

    Every UI action is one synchronous transition. The engine components
    receive the grid explicitly; the only session-level state is
    ``self.state``, swapped as a whole.
    """

    def __init__(self, layout: WarehouseLayout, products: Optional[List[Product]] = None,
                 settings: Optional[Settings] = None, weights: Optional[ScoringWeights] = None):
        self.layout = layout
        self.products: Dict[str, Product] = {p.product_id: p for p in (products or [])}
        self.settings = settings or Settings()
        self.weights = weights or ScoringWeights()
        self.state = SessionState()
        self.logger = get_logger()

    # Lookups

    def get_product(self, product_id: Optional[str]) -> Optional[Product]:
        if product_id is None:
            return None
        return self.products.get(product_id)

    def get_cell_by_product(self, product_id: str) -> Optional[Cell]:
        return self.layout.cell_holding(product_id)

    @property
    def selected_cell(self) -> Optional[Cell]:
        if self.state.selected_cell_id is None:
            return None
        return self.layout.get_cell(self.state.selected_cell_id)

    def update_settings(self, settings: Settings):
        self.settings = settings
        self.logger.info(f"Settings updated: {settings.to_dict()}")

    # Transitions

    def select_cell(self, cell_id: Optional[str]) -> SessionState:
        """Select a cell (or clear the selection); ignored during a move"""
        if self.state.mode is SessionMode.RELOCATING:
            self.logger.debug("Selection ignored while relocating")
            return self.state

        if cell_id is None:
            self.state = SessionState()
            return self.state

        if self.layout.get_cell(cell_id) is None:
            raise ValidationError(f"Unknown cell {cell_id}")
        self.state = SessionState(mode=SessionMode.CELL_SELECTED, selected_cell_id=cell_id)
        return self.state

    def add_product(self, name: str, volume: float) -> PlacementResult:
        """Register a new product and place it at its optimal cell when that cell is free"""
        name = (name or '').strip()
        if len(name) < MIN_PRODUCT_NAME_LENGTH:
            raise ValidationError(f"Name must be at least {MIN_PRODUCT_NAME_LENGTH} characters")
        if not 0 < volume <= self.layout.cell_capacity:
            raise ValidationError(
                f"Volume must be positive and at most the cell capacity ({self.layout.cell_capacity:g})")

        product = Product(product_id=str(uuid.uuid4()), name=name, volume=volume)
        self.products[product.product_id] = product

        result = PlacementScorer(self.layout, self.weights).optimize(product)
        if not result.success:
            self.logger.warning(f"No placement found for new product {name}")
            return result

        cell = result.cell
        if cell.is_empty:
            self.layout.place(product, cell)
            result.placed = True
            self.state = SessionState(mode=SessionMode.CELL_SELECTED,
                                      selected_cell_id=cell.cell_id,
                                      suggested_cell_id=cell.cell_id)
            self.logger.info(f"Added {name} (volume {volume:g}) at {cell.cell_id}")
        else:
            self.state = replace(self.state, suggested_cell_id=cell.cell_id)
            self.logger.info(f"Added {name}; no empty cell, suggested {cell.cell_id}")
        return result

    def _relocation_constraint(self, source: Cell) -> Optional[AxisConstraint]:
        if self.settings.relocation_mode is RelocationMode.SAME_ROW:
            return AxisConstraint.row(source.row)
        return None

    def start_move(self, cell_id: str) -> List[MoveTarget]:
        """Begin relocating the product in ``cell_id`` and compute its move targets"""
        source = self.layout.get_cell(cell_id)
        if source is None or source.is_empty:
            self.logger.debug(f"Move not started: {cell_id} holds no product")
            return []

        product = self.get_product(source.product_id)
        if product is None:
            raise InvariantViolation(f"Cell {cell_id} references unknown product {source.product_id}")

        constraint = self._relocation_constraint(source)
        ideal = PlacementScorer(self.layout, self.weights).compute_optimal_cell(product, constraint)
        if ideal is None:
            ideal = source

        empty_cells = self.layout.empty_cells()
        if constraint is not None:
            empty_cells = [c for c in empty_cells if constraint.matches(c)]

        targets = ZoneClassifier(self.layout, self.settings).optimize(
            ideal, empty_cells, exclude_cell_id=source.cell_id)

        self.state = SessionState(mode=SessionMode.RELOCATING,
                                  source_cell_id=source.cell_id,
                                  ideal_cell_id=ideal.cell_id,
                                  move_targets=tuple(targets))
        self.logger.info(f"Relocating {product.name} from {source.cell_id}: ideal {ideal.cell_id}, "
                         f"{len(targets)} target(s)")
        return targets

    def cancel_move(self) -> SessionState:
        self.state = SessionState()
        return self.state

    def execute_move(self, cell_id: str) -> MoveResult:
        """Move the relocating product to ``cell_id``, chaining when configured"""
        if self.state.mode is not SessionMode.RELOCATING:
            return MoveResult(success=False, destination_cell_id=cell_id,
                              error=InvariantViolation("No relocation in progress"))

        source = self.layout.get_cell(self.state.source_cell_id)
        destination = self.layout.get_cell(cell_id)
        result = MoveResult(success=False, source_cell_id=source.cell_id, destination_cell_id=cell_id)

        if destination is None:
            result.error = NoPathError(f"Unknown destination {cell_id}")
            return result

        product_id = source.product_id
        if self.settings.chains_moves:
            shift = ChainShiftPathfinder(self.layout).optimize(source, destination)
            if shift.success:
                result.success = True
                result.chained = True
                result.path = [c.cell_id for c in shift.path]
                # Each product on the chain advances one cell
                result.destination_cell_id = shift.path[1].cell_id
            else:
                self.logger.info(f"Chain shift failed ({shift.error}); trying a direct move")

        if not result.success:
            if not destination.is_empty or destination.cell_id == source.cell_id:
                result.error = NoPathError(
                    f"Cannot relocate along this path: {source.cell_id} -> {destination.cell_id}")
                self.logger.warning(str(result.error))
                return result
            self.layout.move(source, destination)
            result.success = True
            result.path = [source.cell_id, destination.cell_id]

        self.state = SessionState(mode=SessionMode.CELL_SELECTED,
                                  selected_cell_id=self.layout.cell_holding(product_id).cell_id)
        return result
