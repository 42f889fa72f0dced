"""Table assignment: regions, assigned cells, and the layouter.

The Table is the global structure one assignment pass fills in: advice cell
values, public instance values, selector enabled-row sets, copy constraints,
and the list of placed regions. It is created empty, written monotonically
(each cell at most once), then frozen and handed to the oracle.

A Layouter places regions one after another. A Region is a named block of
rows; inside it a chip enables selectors, writes advice cells at offsets
relative to the region start, and registers copy constraints.

Two modes exist:
    witness_required=True   proving / mock proving; an Unknown value written
                            to the table raises MissingWitness immediately.
    witness_required=False  key derivation; values stay Unknown, only the
                            shape (selectors, copies, regions) matters.

Row rules enforced here:
    - a cell past the usable rows raises NotEnoughRowsAvailable;
    - enabling a selector whose gate window leaves the usable rows raises
      OutOfBoundsWindow;
    - closing a region with an enabled gate window that reads a cell nobody
      assigned yet raises OutOfBoundsWindow. Rotations that look forward
      therefore require the whole window to be assigned in one region.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, TypeVar

from plonkish.column import Cell, Column, Selector
from plonkish.constraint_system import ConstraintSystem
from plonkish.errors import (
    DuplicateAssignment,
    InstanceTooLarge,
    InvalidEquality,
    MissingWitness,
    NotEnoughRowsAvailable,
    OutOfBoundsWindow,
    TableFrozen,
)
from plonkish.value import Value
from primitives.field import to_field

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RegionInfo:
    """A placed region: rows [start, end)."""
    name: str
    start: int
    end: int

    def __contains__(self, row: int) -> bool:
        return self.start <= row < self.end


class Table:
    """Assigned cells, selectors, and copy constraints of one synthesis pass."""

    def __init__(
        self,
        cs: ConstraintSystem,
        k: int,
        instances: Optional[Sequence[Sequence]] = None,
        witness_required: bool = True,
    ):
        self.cs = cs
        self.k = k
        self.n = 1 << k
        if self.n < cs.minimum_rows():
            raise NotEnoughRowsAvailable(
                f"k={k} gives {self.n} rows, circuit needs at least {cs.minimum_rows()}"
            )
        self.usable_rows = cs.usable_rows(k)
        self.witness_required = witness_required
        self.instances = None if instances is None else self._load_instances(instances)

        self._advice: Dict[Cell, Value] = {}
        self._selectors: Dict[Selector, Set[int]] = {}
        # insertion-ordered set of normalized (left, right) pairs
        self._copies: Dict[Tuple[Cell, Cell], None] = {}
        self.regions: List[RegionInfo] = []
        self.frozen = False

    def _load_instances(self, instances) -> List[list]:
        columns = self.cs.instance_columns()
        if len(instances) != len(columns):
            raise InstanceTooLarge(
                f"Got {len(instances)} instance vectors for "
                f"{len(columns)} instance column(s)"
            )
        loaded = []
        for column, values in zip(columns, instances):
            if len(values) > self.usable_rows:
                raise InstanceTooLarge(
                    f"{column} has {len(values)} values, "
                    f"only {self.usable_rows} usable rows"
                )
            loaded.append([to_field(self.cs.field, v) for v in values])
        return loaded

    # --- Guards ---

    def _check_open(self) -> None:
        if self.frozen:
            raise TableFrozen("Table is frozen, assignment already finished")

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.usable_rows:
            raise NotEnoughRowsAvailable(
                f"Row {row} outside usable rows [0, {self.usable_rows}) for k={self.k}"
            )

    # --- Advice ---

    def assign_advice(self, cell: Cell, value: Value, annotation: str = "") -> Value:
        """Write value into an advice cell. Returns the stored (field) value."""
        self._check_open()
        if not cell.column.is_advice or not self.cs.owns(cell.column):
            raise TypeError(f"{cell.column} is not an advice column of this circuit")
        self._check_row(cell.row)
        if not isinstance(value, Value):
            value = Value.known(value)
        if self.witness_required and not value.is_known():
            raise MissingWitness(f"Witness for '{annotation or cell}' at {cell} is unknown")
        value = value.map(lambda v: to_field(self.cs.field, v))

        existing = self._advice.get(cell)
        if existing is not None:
            if existing == value:
                return existing
            raise DuplicateAssignment(
                f"{cell} already holds {existing}, cannot write {value}"
            )
        self._advice[cell] = value
        return value

    def advice_value(self, cell: Cell) -> Optional[Value]:
        """Assigned value of an advice cell, None if never assigned."""
        return self._advice.get(cell)

    def is_assigned(self, cell: Cell) -> bool:
        if cell.column.is_instance:
            return 0 <= cell.row < self.usable_rows
        return cell in self._advice

    def assigned_cells(self) -> List[Cell]:
        return sorted(self._advice, key=Cell.sort_key)

    def column_values(self, column: Column):
        """Known contents of column over the usable rows as a field array.

        Unassigned and unknown cells read as zero.
        """
        values = self.cs.field.Zeros(self.usable_rows)
        for row in range(self.usable_rows):
            if column.is_instance:
                value = self.instance_value(column, row)
            else:
                value = self._advice.get(Cell(column, row), Value.unknown())
            if value.is_known():
                values[row] = value.assign()
        return values

    # --- Instance ---

    def instance_value(self, column: Column, row: int) -> Value:
        """Public value at (column, row); zero past the supplied vector."""
        self._check_row(row)
        if self.instances is None:
            return Value.unknown()
        values = self.instances[column.index]
        if row < len(values):
            return Value.known(values[row])
        return Value.known(self.cs.field(0))

    # --- Selectors ---

    def enable_selector(self, selector: Selector, row: int) -> None:
        """Turn selector on at row. Selectors are never turned off again."""
        self._check_open()
        low, high = self.cs.rotation_bounds(selector)
        if row + low < 0 or row + high >= self.usable_rows:
            raise OutOfBoundsWindow(
                f"{selector} at row {row} opens window [{row + low}, {row + high}] "
                f"outside usable rows [0, {self.usable_rows})"
            )
        self._selectors.setdefault(selector, set()).add(row)

    def is_enabled(self, selector: Selector, row: int) -> bool:
        return row in self._selectors.get(selector, ())

    def selector_rows(self, selector: Selector) -> frozenset:
        return frozenset(self._selectors.get(selector, ()))

    # --- Copy constraints ---

    def copy(self, left: Cell, right: Cell) -> None:
        """Constrain two cells equal. Unordered and de-duplicated."""
        self._check_open()
        for cell in (left, right):
            if not self.cs.is_equality_enabled(cell.column):
                raise InvalidEquality(
                    f"Copy constraint on {cell}: {cell.column} is not equality-enabled"
                )
            self._check_row(cell.row)
        pair = tuple(sorted((left, right), key=Cell.sort_key))
        self._copies[pair] = None

    def copy_constraints(self) -> List[Tuple[Cell, Cell]]:
        return list(self._copies)

    # --- Regions ---

    @property
    def next_row(self) -> int:
        return self.regions[-1].end if self.regions else 0

    def add_region(self, info: RegionInfo) -> None:
        self._check_open()
        self.regions.append(info)

    def region_at(self, row: int) -> Optional[RegionInfo]:
        for info in self.regions:
            if row in info:
                return info
        return None

    def freeze(self) -> "Table":
        self.frozen = True
        return self


@dataclass(frozen=True)
class AssignedCell:
    """A cell together with the value written into it."""
    cell: Cell
    value: Value
    annotation: str = ""

    def copy_advice(self, annotation: str, region: "Region", column: Column, offset: int) -> "AssignedCell":
        """Write this cell's value into region and constrain the two equal."""
        copied = region.assign_advice(annotation, column, offset, self.value)
        region.constrain_equal(self.cell, copied.cell)
        return copied


class Region:
    """A named block of rows starting at a fixed table row."""

    def __init__(self, table: Table, name: str, start: int):
        self.table = table
        self.name = name
        self.start = start
        self.height = 0
        self._enabled: List[Tuple[Selector, int]] = []

    def _absolute(self, offset: int) -> int:
        if offset < 0:
            raise ValueError(f"Region '{self.name}': negative offset {offset}")
        self.height = max(self.height, offset + 1)
        return self.start + offset

    def enable_selector(self, selector: Selector, offset: int) -> None:
        row = self._absolute(offset)
        self.table.enable_selector(selector, row)
        self._enabled.append((selector, row))

    def assign_advice(self, annotation: str, column: Column, offset: int, value: Value) -> AssignedCell:
        cell = Cell(column, self._absolute(offset))
        stored = self.table.assign_advice(cell, value, annotation)
        return AssignedCell(cell, stored, annotation)

    def assign_advice_from_instance(
        self,
        annotation: str,
        instance: Column,
        row: int,
        advice: Column,
        offset: int,
    ) -> AssignedCell:
        """Copy a public value into an advice cell and constrain them equal."""
        value = self.table.instance_value(instance, row)
        assigned = self.assign_advice(annotation, advice, offset, value)
        self.table.copy(Cell(instance, row), assigned.cell)
        return assigned

    def constrain_equal(self, left: Cell, right: Cell) -> None:
        self.table.copy(left, right)

    def check_windows(self) -> None:
        """Every gate window opened in this region must be fully assigned."""
        cs = self.table.cs
        for selector, row in self._enabled:
            for gate in cs.gates_for(selector):
                for query in gate.advice_queries:
                    cell = Cell(query.column, row + query.rotation.offset)
                    if not self.table.is_assigned(cell):
                        raise OutOfBoundsWindow(
                            f"Gate '{gate.name}' enabled at row {row} in region "
                            f"'{self.name}' reads {cell}, which is not assigned"
                        )


class Layouter:
    """Places regions sequentially and exposes cells to instance columns."""

    def __init__(self, table: Table, namespace: Tuple[str, ...] = ()):
        self.table = table
        self._namespace = namespace

    def namespace(self, name: str) -> "Layouter":
        return Layouter(self.table, self._namespace + (name,))

    def _qualify(self, name: str) -> str:
        return "/".join(self._namespace + (name,))

    def assign_region(self, name: str, assignment: Callable[[Region], T]) -> T:
        region = Region(self.table, self._qualify(name), self.table.next_row)
        result = assignment(region)
        region.check_windows()
        info = RegionInfo(region.name, region.start, region.start + region.height)
        self.table.add_region(info)
        logger.debug("Region '%s' placed at rows [%d, %d)", info.name, info.start, info.end)
        return result

    def constrain_instance(self, cell: AssignedCell, column: Column, row: int) -> None:
        """Bind cell to (column, row) of the public inputs. Idempotent."""
        if not column.is_instance:
            raise TypeError(f"constrain_instance() needs an instance column, got {column}")
        if self.table.witness_required and not cell.value.is_known():
            raise MissingWitness(f"Exposed cell {cell.cell} has no known value")
        self.table.copy(cell.cell, Cell(column, row))
