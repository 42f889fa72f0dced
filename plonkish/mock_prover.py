"""Mock prover: checks an assigned table directly, without a proof.

MockProver plays the verification oracle. It synthesizes a circuit with a
witness and public inputs, then evaluates every gate at every row where one
of its selectors is enabled and compares the values on both ends of every
copy constraint. Instance cells take the declared public inputs, so a copy
constraint into the instance column is what binds a cell to a public value.

Example:
    prover = MockProver.run(4, circuit, [[1, 1, 55]])
    prover.assert_satisfied()
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from plonkish.circuit import Circuit, synthesize_table
from plonkish.column import Cell
from plonkish.constraint_system import ConstraintSystem, Gate
from plonkish.errors import ConstraintViolation
from plonkish.layouter import Table
from primitives.field import FF

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    CONSTRAINT_NOT_SATISFIED = "constraint not satisfied"
    CELL_NOT_ASSIGNED = "cell not assigned"
    PERMUTATION = "permutation"
    OUT_OF_BOUNDS = "out of bounds"


@dataclass(frozen=True)
class VerifyFailure:
    """One reason the table is rejected."""
    kind: FailureKind
    row: int
    gate: Optional[str] = None
    constraint: Optional[int] = None
    cell: Optional[Cell] = None
    region: Optional[str] = None
    detail: str = ""

    def __str__(self) -> str:
        where = f"row {self.row}"
        if self.region:
            where += f" (region '{self.region}')"
        if self.gate is not None:
            where += f", gate '{self.gate}' constraint {self.constraint}"
        if self.cell is not None:
            where += f", cell {self.cell}"
        return f"{self.kind.value} at {where}: {self.detail}"


class MockProver:
    """Constraint checker over a fully assigned table."""

    def __init__(self, cs: ConstraintSystem, table: Table):
        self.cs = cs
        self.table = table
        self.field = cs.field

    @classmethod
    def run(
        cls,
        k: int,
        circuit: Circuit,
        instances: Sequence[Sequence],
        field=FF,
    ) -> "MockProver":
        """Synthesize circuit with its witness. Assignment errors propagate."""
        cs, _, table = synthesize_table(circuit, k, instances, field, witness_required=True)
        logger.debug(
            "Synthesized %s: %d regions, %d copy constraints",
            type(circuit).__name__, len(table.regions), len(table.copy_constraints()),
        )
        return cls(cs, table)

    # --- Resolvers ---

    def _cell_value(self, cell: Cell):
        if cell.column.is_instance:
            return self.table.instance_value(cell.column, cell.row).assign(str(cell))
        value = self.table.advice_value(cell)
        return None if value is None else value.assign(str(cell))

    def _region_name(self, row: int) -> Optional[str]:
        info = self.table.region_at(row)
        return info.name if info else None

    # --- Checks ---

    def _verify_gate_at(self, gate: Gate, row: int) -> List[VerifyFailure]:
        failures = []
        for query in gate.advice_queries + gate.instance_queries:
            target = Cell(query.column, row + query.rotation.offset)
            if not 0 <= target.row < self.table.usable_rows:
                failures.append(VerifyFailure(
                    FailureKind.OUT_OF_BOUNDS, row, gate.name, cell=target,
                    region=self._region_name(row),
                    detail=f"query leaves usable rows [0, {self.table.usable_rows})",
                ))
            elif query.column.is_advice and self.table.advice_value(target) is None:
                failures.append(VerifyFailure(
                    FailureKind.CELL_NOT_ASSIGNED, row, gate.name, cell=target,
                    region=self._region_name(row),
                    detail="gate reads a cell that was never assigned",
                ))
        if failures:
            return failures

        field = self.field
        one, zero = field(1), field(0)

        def selector(expr):
            return one if self.table.is_enabled(expr.selector, row) else zero

        def column(expr):
            return self._cell_value(Cell(expr.column, row + expr.rotation.offset))

        for index, poly in enumerate(gate.polys):
            result = poly.evaluate(field, selector, column, column)
            if int(result) != 0:
                failures.append(VerifyFailure(
                    FailureKind.CONSTRAINT_NOT_SATISFIED, row, gate.name, index,
                    region=self._region_name(row),
                    detail=f"{poly} evaluates to {int(result)}",
                ))
        return failures

    def _verify_gates(self) -> List[VerifyFailure]:
        failures = []
        for gate in self.cs.gates:
            rows = set()
            for selector in gate.selectors:
                rows |= self.table.selector_rows(selector)
            # rows with every selector off satisfy the gate vacuously
            for row in sorted(rows):
                failures.extend(self._verify_gate_at(gate, row))
        return failures

    def _verify_copies(self) -> List[VerifyFailure]:
        failures = []
        for left, right in self.table.copy_constraints():
            missing = [c for c in (left, right) if self._cell_value(c) is None]
            if missing:
                for cell in missing:
                    failures.append(VerifyFailure(
                        FailureKind.CELL_NOT_ASSIGNED, cell.row, cell=cell,
                        region=self._region_name(cell.row),
                        detail=f"copy constraint {left} == {right} references it",
                    ))
                continue
            lhs, rhs = self._cell_value(left), self._cell_value(right)
            if lhs != rhs:
                failures.append(VerifyFailure(
                    FailureKind.PERMUTATION, left.row, cell=left,
                    region=self._region_name(left.row),
                    detail=f"{left} = {int(lhs)} but {right} = {int(rhs)}",
                ))
        return failures

    def verify(self) -> List[VerifyFailure]:
        """Every gate and copy constraint failure, empty if the table is valid."""
        failures = self._verify_gates() + self._verify_copies()
        for failure in failures:
            logger.warning("%s", failure)
        return failures

    def assert_satisfied(self) -> None:
        failures = self.verify()
        if failures:
            raise ConstraintViolation(failures)
