"""Fibonacci chips.

Two layouts of the same recurrence:
- fibonacci: three advice columns, rows chained by copy constraints
- fibonacci_single: one advice column, rows chained by gate rotations
"""

from chips.base import PUBLIC_A_ROW, PUBLIC_B_ROW, PUBLIC_OUTPUT_ROW, FiboChipBase
from chips.fibonacci import FiboChip as MultiColumnFiboChip
from chips.fibonacci import FiboConfig as MultiColumnFiboConfig
from chips.fibonacci_single import FiboChip as SingleColumnFiboChip
from chips.fibonacci_single import FiboConfig as SingleColumnFiboConfig

__all__ = [
    "PUBLIC_A_ROW",
    "PUBLIC_B_ROW",
    "PUBLIC_OUTPUT_ROW",
    "FiboChipBase",
    "MultiColumnFiboChip",
    "MultiColumnFiboConfig",
    "SingleColumnFiboChip",
    "SingleColumnFiboConfig",
]
