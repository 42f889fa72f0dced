"""Fibonacci circuits over the two chip layouts.

Both circuits prove the first n_rows terms of

    term_1 = a0, term_2 = b0, term_{i+2} = term_i + term_{i+1}

and bind [a0, b0, term_{n_rows}] to the instance column. For a0 = b0 = 1 and
n_rows = 10 the public inputs are [1, 1, 55].

MultiColumnFiboCircuit takes the seeds as private witness values and uses
n_rows - 2 table rows. SingleColumnFiboCircuit reads the seeds from the
instance column and uses n_rows table rows.
"""

from typing import List, Optional, Union

from chips.base import PUBLIC_A_ROW, PUBLIC_B_ROW, PUBLIC_OUTPUT_ROW
from chips.fibonacci import FiboChip as MultiColumnFiboChip
from chips.fibonacci import FiboConfig as MultiColumnFiboConfig
from chips.fibonacci_single import FiboChip as SingleColumnFiboChip
from chips.fibonacci_single import FiboConfig as SingleColumnFiboConfig
from plonkish import Circuit, ConstraintSystem, Layouter, Value

MIN_ROWS = 3


def _check_rows(n_rows: int) -> int:
    if n_rows < MIN_ROWS:
        raise ValueError(f"n_rows must be >= {MIN_ROWS}, got {n_rows}")
    return n_rows


def _as_value(value: Optional[Union[int, Value]]) -> Value:
    if value is None:
        return Value.unknown()
    if isinstance(value, Value):
        return value
    return Value.known(value)


# --- Reference Sequence ---

def fibonacci_term(a0: int, b0: int, n: int) -> int:
    """n-th term (1-indexed) of the sequence seeded with a0, b0."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    a, b = a0, b0
    for _ in range(n - 1):
        a, b = b, a + b
    return a


def public_inputs(a0: int, b0: int, n_rows: int) -> List[int]:
    """Instance column contents [a0, b0, output] in public-row order."""
    values = [0, 0, 0]
    values[PUBLIC_A_ROW] = a0
    values[PUBLIC_B_ROW] = b0
    values[PUBLIC_OUTPUT_ROW] = fibonacci_term(a0, b0, n_rows)
    return values


# --- Circuits ---

class MultiColumnFiboCircuit(Circuit):
    """Three-column layout with private seeds.

    With expose_public=False nothing is bound to the instance column and the
    circuit only proves that some sequence was computed correctly.
    """

    def __init__(self, a=None, b=None, n_rows: int = 10, expose_public: bool = True):
        self.a = _as_value(a)
        self.b = _as_value(b)
        self.n_rows = _check_rows(n_rows)
        self.expose_public = expose_public

    def without_witnesses(self) -> "MultiColumnFiboCircuit":
        return MultiColumnFiboCircuit(n_rows=self.n_rows, expose_public=self.expose_public)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> MultiColumnFiboConfig:
        col_a = meta.advice_column()
        col_b = meta.advice_column()
        col_c = meta.advice_column()
        instance = meta.instance_column()
        return MultiColumnFiboChip.configure(meta, (col_a, col_b, col_c), instance)

    def synthesize(self, config: MultiColumnFiboConfig, layouter: Layouter) -> None:
        chip = MultiColumnFiboChip.construct(config)

        prev_a, prev_b, prev_c = chip.assign_first_row(
            layouter.namespace("first row"), self.a, self.b)
        if self.expose_public:
            chip.expose_public(layouter.namespace("private a"), prev_a, PUBLIC_A_ROW)
            chip.expose_public(layouter.namespace("private b"), prev_b, PUBLIC_B_ROW)

        # first row produced terms 1..3, each further row one more term
        for _ in range(MIN_ROWS, self.n_rows):
            prev_b, prev_c = chip.assign_row(layouter.namespace("next row"), prev_b, prev_c)

        if self.expose_public:
            chip.expose_public(layouter.namespace("output"), prev_c, PUBLIC_OUTPUT_ROW)


class SingleColumnFiboCircuit(Circuit):
    """One-column layout; seeds come from the instance column."""

    def __init__(self, n_rows: int = 10):
        self.n_rows = _check_rows(n_rows)

    def without_witnesses(self) -> "SingleColumnFiboCircuit":
        return SingleColumnFiboCircuit(n_rows=self.n_rows)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> SingleColumnFiboConfig:
        advice = meta.advice_column()
        instance = meta.instance_column()
        return SingleColumnFiboChip.configure(meta, advice, instance)

    def synthesize(self, config: SingleColumnFiboConfig, layouter: Layouter) -> None:
        chip = SingleColumnFiboChip.construct(config)
        out_cell = chip.assign(layouter.namespace("entire table"), self.n_rows)
        chip.expose_public(layouter.namespace("output"), out_cell, PUBLIC_OUTPUT_ROW)


LAYOUTS = {
    "multi": MultiColumnFiboCircuit,
    "single": SingleColumnFiboCircuit,
}
