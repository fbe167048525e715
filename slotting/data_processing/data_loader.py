import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from slotting.models.cell import Cell, make_cell_id, parse_location
from slotting.models.product import Product
from slotting.models.settings import Settings
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.constants import DEFAULT_CELL_CAPACITY, LISTING_COLUMNS
from slotting.utils.error_handler import DataLoadError, handle_errors
from slotting.utils.logger import get_logger

class DataLoader:
    """Handle all data loading operations"""

    def __init__(self, data_path: Union[str, Path] = "data", cell_capacity: float = DEFAULT_CELL_CAPACITY):
        self.data_path = Path(data_path)
        self.cell_capacity = float(cell_capacity)
        self.logger = get_logger()
        self.skipped_records: List[str] = []

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            path = self.data_path / path
        if not path.exists():
            raise DataLoadError(f"Data file not found: {path}")
        return path

    @handle_errors(raise_on_error=True)
    def load_listing(self, path: Union[str, Path]) -> Tuple[WarehouseLayout, List[Product]]:
        """Load a warehouse listing (JSON array of location records)"""
        file_path = self._resolve_path(path)

        try:
            df = pd.read_json(file_path, orient='records', dtype=False)
        except ValueError as e:
            raise DataLoadError(f"Failed to read or parse warehouse data {file_path}: {e}") from e

        layout, products = self._dataframe_to_layout(df)
        self.logger.info(f"Loaded {len(layout.cells)} cells and {len(products)} products from {file_path.name}")
        return layout, products

    def load_listing_records(self, records: List[Dict]) -> Tuple[WarehouseLayout, List[Product]]:
        """Same as load_listing for records already in memory"""
        return self._dataframe_to_layout(pd.DataFrame.from_records(records))

    def _dataframe_to_layout(self, df: pd.DataFrame) -> Tuple[WarehouseLayout, List[Product]]:
        """Convert listing rows into a complete grid and its products"""
        location_col = LISTING_COLUMNS['location']
        if df.empty or location_col not in df.columns:
            raise DataLoadError(f"Listing has no '{location_col}' column")

        self.skipped_records = []
        cells: Dict[Tuple[int, int, int], Cell] = {}
        products: Dict[str, Product] = {}

        for _, row in df.iterrows():
            location = row.get(location_col)
            if location is None or pd.isna(location) or not str(location).strip():
                continue

            coords = parse_location(location)
            if coords is None:
                self.logger.warning(f"Skipping entry with unexpected location format: {location}")
                self.skipped_records.append(str(location))
                continue

            cell = cells.get(coords)
            if cell is None:
                level, row_idx, column = coords
                cell = Cell(level=level, row=row_idx, column=column,
                            cell_id=make_cell_id(level, row_idx, column), name=str(location).strip())
                cells[coords] = cell

            product = self._row_to_product(row)
            if product is None:
                continue

            if product.product_id in products:
                self.logger.warning(f"Product {product.product_id} listed more than once; "
                                    f"keeping its first location")
                continue

            products[product.product_id] = product
            cell.initial_product_ids.append(product.product_id)
            if not product.fits(self.cell_capacity):
                self.logger.warning(f"Product {product.product_id} volume {product.volume:g} "
                                    f"does not fit cell capacity {self.cell_capacity:g}; left unplaced")
            elif cell.product_id is None:
                cell.product_id = product.product_id
            else:
                self.logger.warning(f"Location {cell.name} lists several products; "
                                    f"{product.product_id} left unplaced")

        if not cells:
            raise DataLoadError("Listing contains no valid locations")

        levels = max(c[0] for c in cells) + 1
        rows = max(c[1] for c in cells) + 1
        columns = max(c[2] for c in cells) + 1

        # Locations missing from the listing become empty cells
        for level in range(levels):
            for row_idx in range(rows):
                for column in range(columns):
                    if (level, row_idx, column) not in cells:
                        cells[(level, row_idx, column)] = Cell(level=level, row=row_idx, column=column)

        layout = WarehouseLayout(levels=levels, rows=rows, columns=columns,
                                 cell_capacity=self.cell_capacity, cells=list(cells.values()))
        return layout, list(products.values())

    def _row_to_product(self, row: pd.Series) -> Optional[Product]:
        product_id = row.get(LISTING_COLUMNS['product_id'])
        name = row.get(LISTING_COLUMNS['product_name'])
        volume = row.get(LISTING_COLUMNS['volume'])

        if any(value is None or pd.isna(value) for value in (product_id, name, volume)):
            return None

        if isinstance(product_id, float) and product_id.is_integer():
            product_id = int(product_id)

        try:
            return Product(product_id=str(product_id), name=str(name).strip(), volume=float(volume))
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Error loading product {product_id}: {e}")
            return None

    def load_settings(self, path: Union[str, Path], strict: bool = True) -> Settings:
        """Load session settings from a JSON file"""
        file_path = self._resolve_path(path)
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DataLoadError(f"Settings file {file_path} is not valid JSON: {e}") from e

        settings = Settings.from_dict(data, strict=strict)
        self.logger.info(f"Settings loaded from {file_path.name}: {settings.to_dict()}")
        return settings

    def build_empty_layout(self, levels: int, rows: int, columns: int,
                           cell_capacity: Optional[float] = None) -> WarehouseLayout:
        """Blank grid, used when no listing is available"""
        capacity = self.cell_capacity if cell_capacity is None else cell_capacity
        return WarehouseLayout.create(levels, rows, columns, capacity)
