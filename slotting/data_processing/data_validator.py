from datetime import datetime
from typing import List, Tuple

from slotting.models.product import Product
from slotting.models.settings import Settings
from slotting.models.warehouse import WarehouseLayout
from slotting.utils.constants import MIN_PRODUCT_NAME_LENGTH

class DataValidator:
    """Validate data quality and grid consistency"""

    def __init__(self):
        self.warnings = []
        self.errors = []

    def _reset(self):
        self.warnings = []
        self.errors = []

    def validate_products(self, products: List[Product], cell_capacity: float) -> Tuple[bool, List[str]]:
        """Validate product data and return (is_valid, issues)"""
        self._reset()

        if not products:
            self.warnings.append("No products provided for validation")
            return True, self.warnings

        # Check for duplicates
        product_ids = [p.product_id for p in products]
        if len(product_ids) != len(set(product_ids)):
            duplicates = {pid for pid in product_ids if product_ids.count(pid) > 1}
            self.errors.append(f"Duplicate product IDs found: {duplicates}")

        for product in products:
            if product.volume <= 0:
                self.errors.append(f"{product.name}: Volume must be positive ({product.volume:g})")
            elif product.volume > cell_capacity:
                self.errors.append(f"{product.name}: Volume {product.volume:g} exceeds cell capacity {cell_capacity:g}")

            if len(product.name.strip()) < MIN_PRODUCT_NAME_LENGTH:
                self.warnings.append(f"Product {product.product_id}: Name shorter than "
                                     f"{MIN_PRODUCT_NAME_LENGTH} characters")

        return len(self.errors) == 0, self.errors + self.warnings

    def validate_layout(self, layout: WarehouseLayout, products: List[Product] = None) -> Tuple[bool, List[str]]:
        """Check the lattice and occupancy invariants"""
        self._reset()

        self.errors.extend(layout.check_invariants())

        coords = {c.coordinates for c in layout.cells}
        if len(coords) != len(layout.cells):
            self.errors.append("Grid contains duplicate coordinates")

        if products is not None:
            known = {p.product_id for p in products}
            for cell in layout.occupied_cells():
                if cell.product_id not in known:
                    self.errors.append(f"Cell {cell.cell_id} references unknown product {cell.product_id}")

            unplaced = [p for p in products if layout.cell_holding(p.product_id) is None]
            if unplaced:
                self.warnings.append(f"{len(unplaced)} product(s) are not placed in any cell")

        if layout.cells and not layout.empty_cells():
            self.warnings.append("Warehouse is full; relocations have no target")

        return len(self.errors) == 0, self.errors + self.warnings

    def validate_settings(self, settings: Settings, layout: WarehouseLayout = None) -> Tuple[bool, List[str]]:
        """Sanity-check settings against the grid they will be used on"""
        self._reset()

        if layout is not None:
            longest_walk = layout.rows + layout.columns - 1
            if settings.chain_length > longest_walk:
                self.warnings.append(f"Chain length {settings.chain_length} is longer than any walk "
                                     f"on a level ({longest_walk} cells)")

            span = ((layout.levels - 1) ** 2 + (layout.rows - 1) ** 2 + (layout.columns - 1) ** 2) ** 0.5
            if settings.distance_zone1 > span:
                self.warnings.append(f"Zone 1 threshold {settings.distance_zone1:g} covers the whole grid "
                                     f"(largest distance {span:.1f})")
        return len(self.errors) == 0, self.errors + self.warnings

    def generate_validation_report(self) -> str:
        """Generate a report of the last validation run"""
        report = []
        report.append("DATA VALIDATION REPORT")
        report.append("=" * 50)
        report.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        report.append("")

        if self.errors:
            report.append(f"ERRORS ({len(self.errors)}):")
            report.append("-" * 30)
            for error in self.errors:
                report.append(f"  x {error}")
            report.append("")

        if self.warnings:
            report.append(f"WARNINGS ({len(self.warnings)}):")
            report.append("-" * 30)
            for warning in self.warnings:
                report.append(f"  ! {warning}")
            report.append("")

        if not self.errors and not self.warnings:
            report.append("All validations passed!")

        return "\n".join(report)
