from .warehouse_visualizer import WarehouseVisualizer
from .export_handler import ExportHandler

__all__ = ['WarehouseVisualizer', 'ExportHandler']
