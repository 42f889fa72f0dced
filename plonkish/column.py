"""Column, selector, rotation, and cell descriptors.

These are immutable, hashable handles. The constraint system hands them out
at configuration time and every assignment pass shares them by reference.
"""

from dataclasses import dataclass
from enum import Enum


class ColumnType(Enum):
    """Column visibility."""
    ADVICE = "advice"       # private witness
    INSTANCE = "instance"   # public input


@dataclass(frozen=True)
class Column:
    """A table column, identified by type and per-type index."""
    column_type: ColumnType
    index: int

    @property
    def is_advice(self) -> bool:
        return self.column_type is ColumnType.ADVICE

    @property
    def is_instance(self) -> bool:
        return self.column_type is ColumnType.INSTANCE

    def __str__(self) -> str:
        return f"{self.column_type.value}[{self.index}]"


@dataclass(frozen=True)
class Selector:
    """Boolean pseudo-column switching gates on per row."""
    index: int

    def __str__(self) -> str:
        return f"selector[{self.index}]"


@dataclass(frozen=True)
class Rotation:
    """Signed row offset of a query relative to the gate's row."""
    offset: int

    @classmethod
    def cur(cls) -> "Rotation":
        return cls(0)

    @classmethod
    def next(cls) -> "Rotation":
        return cls(1)

    @classmethod
    def prev(cls) -> "Rotation":
        return cls(-1)


@dataclass(frozen=True)
class Cell:
    """Identity of one table slot, independent of the value it holds."""
    column: Column
    row: int

    def sort_key(self) -> tuple:
        return (self.column.column_type.value, self.column.index, self.row)

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"
