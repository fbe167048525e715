import os
import sys
import tempfile

import matplotlib
matplotlib.use('Agg')

import pytest

# Add project root to path for `main`
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault('SLOTTING_LOG_DIR', tempfile.mkdtemp(prefix='slotting_logs_'))
os.environ.setdefault('SLOTTING_LOG_LEVEL', 'WARNING')

from slotting.models.product import Product
from slotting.models.warehouse import WarehouseLayout


def stock(layout, coordinates, volume=50.0, prefix='P'):
    """Place one new product at each (level, row, column); returns the products"""
    products = []
    for i, (level, row, column) in enumerate(coordinates):
        product = Product(product_id=f"{prefix}{i}", name=f"Product {i}", volume=volume,
                          popularity_score=50)
        layout.place(product, layout.cell_at(level, row, column))
        products.append(product)
    return products


@pytest.fixture
def grid():
    """3 levels x 8 rows x 12 columns, capacity 100"""
    return WarehouseLayout.create(3, 8, 12, 100)


@pytest.fixture
def row_layout():
    """Single level, single row of 8 cells"""
    return WarehouseLayout.create(1, 1, 8, 100)
