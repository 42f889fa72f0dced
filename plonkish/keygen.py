"""Witness-free key derivation.

A real backend turns the selector placement and the copy constraints into
fixed and permutation commitments. Both depend only on the circuit's shape,
so they are derived once from circuit.without_witnesses() and then reused
for every witness. CircuitKey captures exactly that shape.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from plonkish.circuit import Circuit, synthesize_table
from plonkish.column import Cell, Selector
from plonkish.constraint_system import ConstraintSystem
from plonkish.layouter import Table
from primitives.field import FF


@dataclass(frozen=True)
class CircuitKey:
    """Selector placement and copy constraints of a circuit at size 2^k."""
    k: int
    cs: ConstraintSystem
    selectors: Dict[Selector, FrozenSet[int]]
    copies: FrozenSet[Tuple[Cell, Cell]]

    @classmethod
    def from_table(cls, cs: ConstraintSystem, table: Table) -> "CircuitKey":
        selectors = {
            Selector(i): table.selector_rows(Selector(i))
            for i in range(cs.num_selectors)
        }
        return cls(table.k, cs, selectors, frozenset(table.copy_constraints()))

    def is_compatible(self, table: Table) -> bool:
        """True if table was laid out exactly as this key expects."""
        other = CircuitKey.from_table(self.cs, table)
        return (
            table.k == self.k
            and other.selectors == self.selectors
            and other.copies == self.copies
        )


def keygen(k: int, circuit: Circuit, field=FF) -> CircuitKey:
    """Derive the key of circuit without looking at any witness value."""
    cs, _, table = synthesize_table(
        circuit.without_witnesses(), k, instances=None, field=field, witness_required=False,
    )
    return CircuitKey.from_table(cs, table)
