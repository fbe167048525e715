from typing import Dict, List, Optional

import pandas as pd

from slotting.models.product import Product
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.logger import get_logger

class DataTransformer:
    """Transform loaded data into session-ready state and tabular views"""

    def __init__(self):
        self.transformations_applied = []
        self.logger = get_logger()

    def populate_initial_warehouse(self, layout: WarehouseLayout, products: List[Product]) -> List[Product]:
        """Fill empty cells with unplaced products, most popular first.

        Cells are filled in grid order (level, row, column). Returns the
        products that were placed.
        """
        unplaced = [
            p for p in products
            if layout.cell_holding(p.product_id) is None and p.fits(layout.cell_capacity)
        ]
        unplaced.sort(key=lambda p: p.popularity_score, reverse=True)

        placed = []
        empty_cells = iter(layout.empty_cells())
        for product in unplaced:
            cell = next(empty_cells, None)
            if cell is None:
                break
            layout.place(product, cell)
            placed.append(product)

        self.transformations_applied.append(
            f"Initial population: placed {len(placed)} of {len(unplaced)} unplaced products")
        if len(placed) < len(unplaced):
            self.logger.warning(f"{len(unplaced) - len(placed)} product(s) left unplaced: warehouse is full")
        return placed

    def layout_to_frame(self, layout: WarehouseLayout,
                        products: Optional[Dict[str, Product]] = None) -> pd.DataFrame:
        """One row per cell with its occupant details"""
        products = products or {}
        records = []
        for cell in layout.cells:
            product = products.get(cell.product_id) if cell.product_id else None
            records.append({
                'cell_id': cell.cell_id,
                'name': cell.name,
                'level': cell.level,
                'row': cell.row,
                'column': cell.column,
                'product_id': cell.product_id,
                'product_name': product.name if product else None,
                'volume': product.volume if product else 0.0,
                'fill_ratio': product.volume_ratio(layout.cell_capacity) if product else 0.0
            })
        return pd.DataFrame.from_records(records)

    def products_to_frame(self, products: List[Product], layout: WarehouseLayout) -> pd.DataFrame:
        """One row per product with its current cell"""
        records = []
        for product in products:
            cell = layout.cell_holding(product.product_id)
            records.append({
                **product.to_dict(),
                'cell_id': cell.cell_id if cell else None
            })
        columns = ['product_id', 'name', 'volume', 'popularity_score', 'description', 'cell_id']
        return pd.DataFrame.from_records(records, columns=columns)

    def volume_grid(self, layout: WarehouseLayout, products: Dict[str, Product], level: int) -> pd.DataFrame:
        """rows x columns table of occupant volume on one level"""
        df = self.layout_to_frame(layout, products)
        level_df = df[df['level'] == level]
        grid = level_df.pivot(index='row', columns='column', values='volume')
        return grid.reindex(index=range(layout.rows), columns=range(layout.columns)).fillna(0.0)
