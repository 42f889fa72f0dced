"""Single-column Fibonacci chip.

Layout: one advice column holding the whole sequence, one selector, one
instance column. The gate reads three consecutive rows through rotations:

    s * (a[0] + a[+1] - a[+2]) = 0

The recurrence lives in the gate itself, so only the seeds and the output
need copy constraints. The price is that a gate enabled at row r reads rows
r+1 and r+2: those cells must exist before the region closes, so the whole
sequence is assigned as one region, and the last two rows never start a
window.

    row | advice | s
    ----+--------+---
     0  |   1    | 1
     1  |   1    | 1
     2  |   2    | 1
    ... |        |
    n-2 |        | 0
    n-1 |        | 0
"""

from dataclasses import dataclass

from chips.base import PUBLIC_A_ROW, PUBLIC_B_ROW, FiboChipBase
from plonkish import (
    AssignedCell,
    Column,
    ConstraintSystem,
    Layouter,
    Region,
    Rotation,
    Selector,
)

# a window starting at row r covers rows r, r+1, r+2
WINDOW = 3


@dataclass(frozen=True)
class FiboConfig:
    advice: Column
    selector: Selector
    instance: Column


class FiboChip(FiboChipBase):
    """Assigns the whole sequence in a single region."""

    @staticmethod
    def configure(meta: ConstraintSystem, advice: Column, instance: Column) -> FiboConfig:
        selector = meta.selector()

        # Only used to bind seeds and output to the instance column.
        meta.enable_equality(advice)
        meta.enable_equality(instance)

        def add_gate(vc):
            s = vc.query_selector(selector)
            a = vc.query_advice(advice, Rotation.cur())
            b = vc.query_advice(advice, Rotation.next())
            c = vc.query_advice(advice, Rotation(2))
            return [s * (a + b - c)]

        meta.create_gate("add", add_gate)

        return FiboConfig(advice=advice, selector=selector, instance=instance)

    def assign(self, layouter: Layouter, n_rows: int) -> AssignedCell:
        """Fill rows 0..n_rows-1 and return the cell holding the last term."""
        if n_rows < WINDOW:
            raise ValueError(f"Need at least {WINDOW} rows, got {n_rows}")
        config = self.config
        last_window = n_rows - WINDOW

        def table(region: Region):
            a_cell = region.assign_advice_from_instance(
                "a", config.instance, PUBLIC_A_ROW, config.advice, 0)
            b_cell = region.assign_advice_from_instance(
                "b", config.instance, PUBLIC_B_ROW, config.advice, 1)
            for row in range(min(2, last_window + 1)):
                region.enable_selector(config.selector, row)

            for row in range(2, n_rows):
                if row <= last_window:
                    region.enable_selector(config.selector, row)
                c_cell = region.assign_advice(
                    "advice", config.advice, row, a_cell.value + b_cell.value)
                a_cell, b_cell = b_cell, c_cell
            return b_cell

        return layouter.assign_region("entire fibonacci table", table)
