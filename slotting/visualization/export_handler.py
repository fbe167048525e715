import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from slotting.data_processing.data_transformer import DataTransformer
from slotting.models.product import Product
from slotting.models.settings import MoveTarget, Settings
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.logger import get_logger


def _recursive_convert(obj: Any) -> Any:
    """
    Recursively convert:
    - Dict keys that are Enums to their .value
    - Enum values to .value
    - Process nested lists and dicts
    """
    if isinstance(obj, dict):
        new_dict = {}
        for k, v in obj.items():
            new_key = k.value if isinstance(k, Enum) else k
            new_dict[new_key] = _recursive_convert(v)
        return new_dict
    elif isinstance(obj, (list, tuple)):
        return [_recursive_convert(item) for item in obj]
    elif isinstance(obj, Enum):
        return obj.value
    else:
        return obj

class ExportHandler:
    """Handle exporting warehouse state in various formats"""

    def __init__(self, output_dir: Union[str, Path] = "output"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger = get_logger()
        self.transformer = DataTransformer()

    def export_to_json(
        self,
        layout: WarehouseLayout,
        products: Dict[str, Product],
        settings: Optional[Settings] = None,
        move_targets: Optional[List[MoveTarget]] = None,
        filename: str = "warehouse.json"
    ) -> str:
        """Export a snapshot of the grid, products and settings"""

        export_data = {
            'metadata': {
                'created_at': datetime.now().isoformat(),
                'levels': layout.levels,
                'rows': layout.rows,
                'columns': layout.columns,
                'cell_capacity': layout.cell_capacity,
                'occupancy_rate': layout.occupancy_rate
            },
            'settings': settings.to_dict() if settings else None,
            'cells': [cell.to_dict() for cell in layout.cells],
            'products': {},
            'move_targets': [
                {'cell_id': t.cell_id, 'zone': t.zone, 'distance': t.distance}
                for t in (move_targets or [])
            ]
        }

        for product_id, product in products.items():
            cell = layout.cell_holding(product_id)
            export_data['products'][product_id] = {
                **product.to_dict(),
                'cell_id': cell.cell_id if cell else None
            }

        cleaned = _recursive_convert(export_data)

        filepath = self.output_dir / filename
        with open(filepath, 'w') as f:
            json.dump(cleaned, f, indent=2)

        self.logger.info(f"Exported warehouse snapshot to {filepath}")
        return str(filepath)

    def export_to_csv(
        self,
        layout: WarehouseLayout,
        products: Dict[str, Product],
        filename: str = "warehouse_cells.csv"
    ) -> str:
        """Export the cell table"""
        df = self.transformer.layout_to_frame(layout, products)
        filepath = self.output_dir / filename
        df.to_csv(filepath, index=False)
        self.logger.info(f"Exported {len(df)} cells to {filepath}")
        return str(filepath)

    def export_to_excel(
        self,
        layout: WarehouseLayout,
        products: Dict[str, Product],
        filename: str = "warehouse.xlsx"
    ) -> str:
        """Export cells, products and per-level occupancy to Excel"""
        filepath = self.output_dir / filename

        cells_df = self.transformer.layout_to_frame(layout, products)
        products_df = self.transformer.products_to_frame(list(products.values()), layout)

        summary = (cells_df.assign(occupied=cells_df['product_id'].notna())
                   .groupby('level')
                   .agg(cells=('cell_id', 'count'),
                        occupied=('occupied', 'sum'),
                        stored_volume=('volume', 'sum'))
                   .reset_index())
        summary['level'] = summary['level'] + 1
        summary['occupancy_pct'] = (summary['occupied'] / summary['cells'] * 100).round(1)

        with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
            summary.to_excel(writer, sheet_name='Summary', index=False)
            cells_df.to_excel(writer, sheet_name='Cells', index=False)
            products_df.to_excel(writer, sheet_name='Products', index=False)

        self.logger.info(f"Excel export saved to {filepath}")
        return str(filepath)
