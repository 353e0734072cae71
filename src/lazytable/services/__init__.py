from .data_service import TableDataService
from .in_memory_service import InMemoryTableService, apply_filter
from .http_service import HttpTableService

__all__ = [
    "HttpTableService",
    "InMemoryTableService",
    "TableDataService",
    "apply_filter",
]
