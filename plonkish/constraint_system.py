"""Constraint system: the static shape of a circuit.

A ConstraintSystem collects column and selector allocations, the set of
equality-enabled columns, and the gates. It is built once by a circuit's
configure() and never looks at witness values, so keys derived from it are
reusable for any witness.

Example:
    meta = ConstraintSystem()
    col = meta.advice_column()
    selector = meta.selector()
    meta.enable_equality(col)
    meta.create_gate("add", lambda vc: [
        vc.query_selector(selector)
        * (vc.query_advice(col, Rotation.cur())
           + vc.query_advice(col, Rotation.next())
           - vc.query_advice(col, Rotation(2)))
    ])
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Set, Tuple

from plonkish.column import Column, ColumnType, Rotation, Selector
from plonkish.errors import InvalidEquality
from plonkish.expression import AdviceQuery, Expression, InstanceQuery, SelectorExpr
from primitives.field import FF


@dataclass
class Gate:
    """A named list of polynomials that must vanish where the gate is active."""
    name: str
    polys: List[Expression]
    selectors: Tuple[Selector, ...]
    advice_queries: Tuple[AdviceQuery, ...]
    instance_queries: Tuple[InstanceQuery, ...]

    def rotation_bounds(self) -> Tuple[int, int]:
        """(min, max) rotation over all column queries, (0, 0) if none."""
        offsets = [q.rotation.offset for q in self.advice_queries + self.instance_queries]
        if not offsets:
            return (0, 0)
        return (min(offsets), max(offsets))


class VirtualCells:
    """Query handle passed to a gate builder. Records what the gate reads."""

    def __init__(self, meta: "ConstraintSystem"):
        self._meta = meta
        self.selectors: List[Selector] = []
        self.advice_queries: List[AdviceQuery] = []
        self.instance_queries: List[InstanceQuery] = []

    def query_selector(self, selector: Selector) -> SelectorExpr:
        if selector not in self.selectors:
            self.selectors.append(selector)
        return SelectorExpr(selector)

    def query_advice(self, column: Column, rotation: Rotation) -> AdviceQuery:
        if not column.is_advice:
            raise TypeError(f"query_advice() got {column}")
        query = AdviceQuery(column, rotation)
        self.advice_queries.append(query)
        self._meta._record_query(column, rotation)
        return query

    def query_instance(self, column: Column, rotation: Rotation) -> InstanceQuery:
        if not column.is_instance:
            raise TypeError(f"query_instance() got {column}")
        query = InstanceQuery(column, rotation)
        self.instance_queries.append(query)
        return query


class ConstraintSystem:
    """Columns, selectors, equality set, and gates of one circuit."""

    def __init__(self, field=FF):
        self.field = field
        self.num_advice_columns = 0
        self.num_instance_columns = 0
        self.num_selectors = 0
        self.equality: Set[Column] = set()
        self.gates: List[Gate] = []
        # distinct rotations queried per advice column
        self._advice_rotations: Dict[Column, Set[int]] = {}

    # --- Allocation ---

    def advice_column(self) -> Column:
        column = Column(ColumnType.ADVICE, self.num_advice_columns)
        self.num_advice_columns += 1
        return column

    def instance_column(self) -> Column:
        column = Column(ColumnType.INSTANCE, self.num_instance_columns)
        self.num_instance_columns += 1
        return column

    def selector(self) -> Selector:
        selector = Selector(self.num_selectors)
        self.num_selectors += 1
        return selector

    def owns(self, column: Column) -> bool:
        if column.is_advice:
            return column.index < self.num_advice_columns
        return column.index < self.num_instance_columns

    def instance_columns(self) -> List[Column]:
        return [Column(ColumnType.INSTANCE, i) for i in range(self.num_instance_columns)]

    # --- Equality ---

    def enable_equality(self, column: Column) -> None:
        """Register column for copy constraints. Idempotent."""
        if not self.owns(column):
            raise InvalidEquality(f"{column} was not allocated by this constraint system")
        self.equality.add(column)

    def is_equality_enabled(self, column: Column) -> bool:
        return column in self.equality

    # --- Gates ---

    def create_gate(self, name: str, constraints: Callable[[VirtualCells], List[Expression]]) -> Gate:
        cells = VirtualCells(self)
        polys = list(constraints(cells))
        if not polys:
            raise ValueError(f"Gate '{name}' must contain at least one constraint")
        if not cells.selectors:
            raise ValueError(f"Gate '{name}' queries no selector and would never be checked")
        gate = Gate(
            name=name,
            polys=polys,
            selectors=tuple(cells.selectors),
            advice_queries=tuple(cells.advice_queries),
            instance_queries=tuple(cells.instance_queries),
        )
        self.gates.append(gate)
        return gate

    def gates_for(self, selector: Selector) -> List[Gate]:
        return [g for g in self.gates if selector in g.selectors]

    def rotation_bounds(self, selector: Selector) -> Tuple[int, int]:
        """Window shape of all gates governed by selector, relative to its row."""
        bounds = [g.rotation_bounds() for g in self.gates_for(selector)]
        if not bounds:
            return (0, 0)
        return (min(b[0] for b in bounds), max(b[1] for b in bounds))

    def _record_query(self, column: Column, rotation: Rotation) -> None:
        self._advice_rotations.setdefault(column, set()).add(rotation.offset)

    # --- Row budget ---

    def blinding_factors(self) -> int:
        """Rows at the end of the table reserved for zero-knowledge blinding."""
        most = max((len(r) for r in self._advice_rotations.values()), default=1)
        return max(3, most) + 2

    def minimum_rows(self) -> int:
        return self.blinding_factors() + 3

    def usable_rows(self, k: int) -> int:
        return (1 << k) - (self.blinding_factors() + 1)
