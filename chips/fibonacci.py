"""Multi-column Fibonacci chip.

Layout: three advice columns a | b | c, one selector, one instance column.
Each row holds one step of the recurrence and the gate checks it in place:

    s * (a + b - c) = 0          (all queries at Rotation.cur())

Row i+1 is linked to row i only by copy constraints, b_i -> a_{i+1} and
c_i -> b_{i+1}, so every row is its own region and can be assigned
independently.

    row | a  | b  | c  | s
    ----+----+----+----+---
     0  | 1  | 1  | 2  | 1
     1  | 1  | 2  | 3  | 1
     2  | 2  | 3  | 5  | 1
"""

from dataclasses import dataclass
from typing import Tuple

from chips.base import FiboChipBase
from plonkish import (
    AssignedCell,
    Column,
    ConstraintSystem,
    Layouter,
    Region,
    Rotation,
    Selector,
    Value,
)


@dataclass(frozen=True)
class FiboConfig:
    advice: Tuple[Column, Column, Column]
    selector: Selector
    instance: Column


class FiboChip(FiboChipBase):
    """Assigns the recurrence one row per region."""

    @staticmethod
    def configure(
        meta: ConstraintSystem,
        advice: Tuple[Column, Column, Column],
        instance: Column,
    ) -> FiboConfig:
        col_a, col_b, col_c = advice
        selector = meta.selector()

        # Copy constraints chain the rows and bind the instance column.
        meta.enable_equality(col_a)
        meta.enable_equality(col_b)
        meta.enable_equality(col_c)
        meta.enable_equality(instance)

        def add_gate(vc):
            s = vc.query_selector(selector)
            a = vc.query_advice(col_a, Rotation.cur())
            b = vc.query_advice(col_b, Rotation.cur())
            c = vc.query_advice(col_c, Rotation.cur())
            return [s * (a + b - c)]

        meta.create_gate("add", add_gate)

        return FiboConfig(advice=(col_a, col_b, col_c), selector=selector, instance=instance)

    def assign_first_row(
        self, layouter: Layouter, a: Value, b: Value,
    ) -> Tuple[AssignedCell, AssignedCell, AssignedCell]:
        """Write the seeds and their sum. Returns the (a, b, c) cells."""
        col_a, col_b, col_c = self.config.advice

        def first_row(region: Region):
            region.enable_selector(self.config.selector, 0)
            a_cell = region.assign_advice("a", col_a, 0, a)
            b_cell = region.assign_advice("b", col_b, 0, b)
            c_cell = region.assign_advice("c", col_c, 0, a_cell.value + b_cell.value)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("first row", first_row)

    def assign_row(
        self, layouter: Layouter, prev_b: AssignedCell, prev_c: AssignedCell,
    ) -> Tuple[AssignedCell, AssignedCell]:
        """Copy (prev_b, prev_c) into (a, b) of a new row and write c = a + b.

        Returns the new row's (b, c) cells, the inputs of the next row.
        """
        col_a, col_b, col_c = self.config.advice

        def next_row(region: Region):
            region.enable_selector(self.config.selector, 0)
            a_cell = prev_b.copy_advice("a", region, col_a, 0)
            b_cell = prev_c.copy_advice("b", region, col_b, 0)
            c_cell = region.assign_advice("c", col_c, 0, a_cell.value + b_cell.value)
            return b_cell, c_cell

        return layouter.assign_region("next row", next_row)
