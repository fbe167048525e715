"""System-wide constants"""

# Warehouse defaults
DEFAULT_CELL_CAPACITY = 1000.0  # listing files carry no capacity
MIN_PRODUCT_NAME_LENGTH = 3

# Placement scoring weights (row distance >> level >> column)
ROW_WEIGHT = 100.0
LEVEL_WEIGHT = 10.0
COLUMN_WEIGHT = 1.0

# Added on top of the worst positional score for occupied candidates
OCCUPIED_PENALTY_MARGIN = 1.0

# Session settings
DEFAULT_CHAIN_LENGTH = 3
MIN_CHAIN_LENGTH = 1
MAX_CHAIN_LENGTH = 10

# Zone thresholds (distance units in cells)
DEFAULT_ZONE_THRESHOLDS = (2.0, 4.0, 6.0)

# Zone labels
ZONE_EXCLUDED = 0
ZONE_LABELS = {
    1: 'nearest',
    2: 'near',
    3: 'far',
    0: 'excluded'
}

# Listing columns
LISTING_COLUMNS = {
    'location': 'Location',
    'product_id': 'ProductId',
    'product_name': 'ProductName',
    'volume': 'Volume'
}
LEVEL_PREFIX = 'L'
