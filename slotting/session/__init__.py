from .warehouse_session import MoveResult, SessionMode, SessionState, WarehouseSession

__all__ = ['MoveResult', 'SessionMode', 'SessionState', 'WarehouseSession']
