import random
from dataclasses import dataclass
from typing import Optional

@dataclass
class Product:
    """Product stored in a warehouse cell"""
    product_id: str
    name: str
    volume: float

    # Display only; the placement scorer never reads it
    popularity_score: Optional[int] = None
    description: Optional[str] = None

    def __post_init__(self):
        """Fill derived fields"""
        self.product_id = str(self.product_id)
        self.volume = float(self.volume)

        if self.popularity_score is None:
            self.popularity_score = random.randint(0, 100)

        if not self.description:
            self.description = f"Volume: {self.volume:g}"

    def volume_ratio(self, cell_capacity: float) -> float:
        """Share of a cell's capacity this product consumes"""
        if cell_capacity <= 0:
            return 0.0
        return self.volume / cell_capacity

    def fits(self, cell_capacity: float) -> bool:
        return 0 < self.volume <= cell_capacity

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'name': self.name,
            'volume': self.volume,
            'popularity_score': self.popularity_score,
            'description': self.description
        }
