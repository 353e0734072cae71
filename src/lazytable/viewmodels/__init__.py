from .signal import Signal, ObservableProperty
from .row_cache import RowCache
from .presentation_model import TablePresentationModel
from .table_controller import TableController

__all__ = [
    "ObservableProperty",
    "RowCache",
    "Signal",
    "TableController",
    "TablePresentationModel",
]
