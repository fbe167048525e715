from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from slotting.utils.constants import (
    DEFAULT_CHAIN_LENGTH, DEFAULT_ZONE_THRESHOLDS, MAX_CHAIN_LENGTH,
    MIN_CHAIN_LENGTH, ROW_WEIGHT, LEVEL_WEIGHT, COLUMN_WEIGHT
)
from slotting.utils.error_handler import ConfigurationError

class Axis(Enum):
    ROW = "row"
    COLUMN = "column"

class DistanceMetric(Enum):
    EUCLIDEAN = "euclidean"  # sqrt(dcol^2 + drow^2 + dlevel^2)
    COLUMN = "column"        # |dcol|, only meaningful within one row

class RelocationMode(Enum):
    FULL_GRID = "full_grid"
    SAME_ROW = "same_row"

    @property
    def metric(self) -> DistanceMetric:
        if self is RelocationMode.SAME_ROW:
            return DistanceMetric.COLUMN
        return DistanceMetric.EUCLIDEAN

@dataclass(frozen=True)
class AxisConstraint:
    """Restrict candidates to a single row or column"""
    axis: Axis
    value: int

    @classmethod
    def row(cls, value: int) -> 'AxisConstraint':
        return cls(Axis.ROW, value)

    @classmethod
    def column(cls, value: int) -> 'AxisConstraint':
        return cls(Axis.COLUMN, value)

    def matches(self, cell) -> bool:
        if self.axis is Axis.ROW:
            return cell.row == self.value
        return cell.column == self.value

@dataclass(frozen=True)
class MoveTarget:
    """Empty cell suggested for a relocation, with its proximity zone"""
    cell_id: str
    zone: int
    distance: float

@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the reported placement score; ranking itself is lexicographic"""
    row: float = ROW_WEIGHT
    level: float = LEVEL_WEIGHT
    column: float = COLUMN_WEIGHT

    def __post_init__(self):
        if self.row < 0 or self.level < 0 or self.column < 0:
            raise ConfigurationError(f"Scoring weights must be non-negative: {self}")

@dataclass(frozen=True)
class Settings:
    """Session settings: move chaining and zone boundaries"""
    chain_length: int = DEFAULT_CHAIN_LENGTH
    distance_zone1: float = DEFAULT_ZONE_THRESHOLDS[0]
    distance_zone2: float = DEFAULT_ZONE_THRESHOLDS[1]
    distance_zone3: float = DEFAULT_ZONE_THRESHOLDS[2]
    relocation_mode: RelocationMode = RelocationMode.FULL_GRID

    def __post_init__(self):
        if isinstance(self.relocation_mode, str):
            object.__setattr__(self, 'relocation_mode', RelocationMode(self.relocation_mode))

        if int(self.chain_length) != self.chain_length or self.chain_length < MIN_CHAIN_LENGTH:
            raise ConfigurationError(
                f"chain_length must be an integer >= {MIN_CHAIN_LENGTH}, got {self.chain_length}")
        if self.chain_length > MAX_CHAIN_LENGTH:
            raise ConfigurationError(
                f"chain_length must not exceed {MAX_CHAIN_LENGTH}, got {self.chain_length}")

        z1, z2, z3 = self.zone_thresholds
        if z1 <= 0:
            raise ConfigurationError(f"Zone thresholds must be positive, got {self.zone_thresholds}")
        if not (z1 < z2 < z3):
            raise ConfigurationError(
                f"Zone thresholds must be strictly increasing, got {self.zone_thresholds}")

    @property
    def zone_thresholds(self) -> Tuple[float, float, float]:
        return (self.distance_zone1, self.distance_zone2, self.distance_zone3)

    @property
    def chains_moves(self) -> bool:
        """Chain length 1 is a direct move; anything longer shifts a chain"""
        return self.chain_length > 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = True) -> 'Settings':
        """Build settings from a dict; non-strict mode clamps what it can"""
        chain_length = data.get('chain_length', data.get('chainLength', DEFAULT_CHAIN_LENGTH))
        thresholds = [
            data.get('distance_zone1', data.get('distanceZone1', DEFAULT_ZONE_THRESHOLDS[0])),
            data.get('distance_zone2', data.get('distanceZone2', DEFAULT_ZONE_THRESHOLDS[1])),
            data.get('distance_zone3', data.get('distanceZone3', DEFAULT_ZONE_THRESHOLDS[2])),
        ]
        mode = data.get('relocation_mode', RelocationMode.FULL_GRID.value)

        try:
            chain_length = int(chain_length)
            thresholds = [float(t) for t in thresholds]
            mode = RelocationMode(mode)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid settings values: {e}") from e

        if not strict:
            chain_length = max(MIN_CHAIN_LENGTH, min(MAX_CHAIN_LENGTH, chain_length))
            thresholds = sorted(thresholds)

        return cls(
            chain_length=chain_length,
            distance_zone1=thresholds[0],
            distance_zone2=thresholds[1],
            distance_zone3=thresholds[2],
            relocation_mode=mode
        )

    def replace(self, **changes) -> 'Settings':
        data = self.to_dict()
        data.update(changes)
        return Settings.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chain_length': self.chain_length,
            'distance_zone1': self.distance_zone1,
            'distance_zone2': self.distance_zone2,
            'distance_zone3': self.distance_zone3,
            'relocation_mode': self.relocation_mode.value
        }
