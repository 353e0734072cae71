from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SortState(str, Enum):
    ASC = "asc"
    DESC = "desc"
    NONE = ""

    @classmethod
    def parse(cls, token: Any) -> Optional["SortState"]:
        """Return the matching state for *token*, or ``None`` if it is unknown."""
        if isinstance(token, SortState):
            return token
        for state in cls:
            if state.value == token:
                return state
        return None


@dataclass
class ColumnSorter:
    """Single-column sort descriptor."""

    column: Optional[int] = None
    state: SortState = SortState.NONE


@dataclass
class Filter:
    """Filter and sort descriptor sent along with every data request.

    Instances are replaced rather than mutated: the ``with_*`` helpers return
    new objects with copied lists so change notification by reference works.
    """

    column_filters: List[str] = field(default_factory=list)
    column_sorter: ColumnSorter = field(default_factory=ColumnSorter)

    @classmethod
    def empty(cls, column_count: int) -> "Filter":
        return cls(column_filters=[""] * column_count)

    def copy(self) -> "Filter":
        return Filter(
            column_filters=list(self.column_filters),
            column_sorter=ColumnSorter(self.column_sorter.column, self.column_sorter.state),
        )

    def with_column_filter(self, column_index: int, query: str) -> "Filter":
        new_filter = self.copy()
        missing = column_index + 1 - len(new_filter.column_filters)
        if missing > 0:
            new_filter.column_filters.extend([""] * missing)
        new_filter.column_filters[column_index] = query
        return new_filter

    def with_column_count(self, column_count: int) -> "Filter":
        """Return a copy padded with empty filters to *column_count* columns."""
        new_filter = self.copy()
        missing = column_count - len(new_filter.column_filters)
        if missing > 0:
            new_filter.column_filters.extend([""] * missing)
        return new_filter

    def with_sorter(self, column_index: Optional[int], state: SortState) -> "Filter":
        new_filter = self.copy()
        new_filter.column_sorter = ColumnSorter(column_index, state)
        return new_filter

    @property
    def is_active(self) -> bool:
        return any(self.column_filters) or self.column_sorter.state is not SortState.NONE

    # -- wire format -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ColumnFilters": list(self.column_filters),
            "ColumnSorter": {
                "column": self.column_sorter.column,
                "state": self.column_sorter.state.value,
            },
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Filter":
        sorter = payload.get("ColumnSorter") or {}
        state = SortState.parse(sorter.get("state", "")) or SortState.NONE
        return cls(
            column_filters=[str(value) for value in payload.get("ColumnFilters", [])],
            column_sorter=ColumnSorter(sorter.get("column"), state),
        )
