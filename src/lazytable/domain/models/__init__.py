from .filter import ColumnSorter, Filter, SortState
from .table_config import TableConfig

__all__ = ["ColumnSorter", "Filter", "SortState", "TableConfig"]
