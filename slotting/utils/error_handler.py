from functools import wraps
from typing import Callable, Any

class SlottingError(Exception):
    """Base exception for the slotting system"""
    pass

class DataLoadError(SlottingError):
    """Error loading listing or settings data"""
    pass

class ValidationError(SlottingError):
    """Input validation error"""
    pass

class ConfigurationError(SlottingError):
    """Settings are inconsistent (chain length, zone thresholds)"""
    pass

class NoCandidateError(SlottingError):
    """Placement scorer found no cell matching the axis constraint"""
    pass

class NoPathError(SlottingError):
    """Chain-shift walk left the grid, hit a cycle or could not finish"""
    pass

class InvariantViolation(SlottingError):
    """A grid mutation would break the one-product-per-cell invariant"""
    pass

def handle_errors(default_return=None, raise_on_error=True):
    """Decorator for error handling"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except SlottingError:
                if raise_on_error:
                    raise
                return default_return
            except Exception as e:
                if raise_on_error:
                    raise SlottingError(f"Unexpected error in {func.__name__}: {str(e)}") from e
                return default_return
        return wrapper
    return decorator
