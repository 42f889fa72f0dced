"""Shared pieces of the Fibonacci chips.

The public-input vector is [a0, b0, output]. Both layouts bind their cells to
these instance rows, and drivers build the vector in the same order, so the
row numbers live here and nowhere else.
"""

from plonkish import AssignedCell, Layouter

PUBLIC_A_ROW = 0
PUBLIC_B_ROW = 1
PUBLIC_OUTPUT_ROW = 2


class FiboChipBase:
    """A chip owns a config and assigns regions against it.

    Subclasses provide configure() and the assignment routines; the config
    must carry an `instance` column for expose_public().
    """

    def __init__(self, config):
        self.config = config

    @classmethod
    def construct(cls, config) -> "FiboChipBase":
        return cls(config)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, row: int) -> None:
        """Constrain cell to equal public input `row`. Safe to repeat."""
        layouter.constrain_instance(cell, self.config.instance, row)
