"""Tests for table assignment: regions, cells, selectors, copies."""

import numpy as np
import pytest

from plonkish import (
    AssignedCell,
    Cell,
    ConstraintSystem,
    DuplicateAssignment,
    InstanceTooLarge,
    InvalidEquality,
    Layouter,
    MissingWitness,
    NotEnoughRowsAvailable,
    OutOfBoundsWindow,
    Rotation,
    Table,
    TableFrozen,
    Value,
)
from primitives.field import FF


def _single_column_system():
    """One advice column with a rotation(0,1,2) gate, one instance column."""
    meta = ConstraintSystem()
    advice = meta.advice_column()
    instance = meta.instance_column()
    selector = meta.selector()
    meta.enable_equality(advice)
    meta.enable_equality(instance)
    meta.create_gate("add", lambda vc: [
        vc.query_selector(selector) * (
            vc.query_advice(advice, Rotation.cur())
            + vc.query_advice(advice, Rotation.next())
            - vc.query_advice(advice, Rotation(2))
        )
    ])
    return meta, advice, instance, selector


class TestTable:
    """Cell writes, selectors, and copy constraints on the raw table."""

    def test_too_small_k_raises(self) -> None:
        """A table shorter than the minimum row count is rejected."""
        meta, _, _, _ = _single_column_system()
        with pytest.raises(NotEnoughRowsAvailable):
            Table(meta, 2)

    def test_assign_converts_to_field(self) -> None:
        """Integer values are stored as field elements."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        stored = table.assign_advice(Cell(advice, 0), Value.known(5))
        assert stored == Value.known(FF(5))
        assert table.advice_value(Cell(advice, 0)) == Value.known(FF(5))
        assert table.is_assigned(Cell(advice, 0))
        assert not table.is_assigned(Cell(advice, 1))

    def test_rewrite_same_value_allowed(self) -> None:
        """Writing the same known value again is a no-op."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        table.assign_advice(Cell(advice, 0), Value.known(5))
        table.assign_advice(Cell(advice, 0), Value.known(5))
        assert table.assigned_cells() == [Cell(advice, 0)]

    def test_rewrite_different_value_raises(self) -> None:
        """A cell is written at most once."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        table.assign_advice(Cell(advice, 0), Value.known(5))
        with pytest.raises(DuplicateAssignment):
            table.assign_advice(Cell(advice, 0), Value.known(6))

    def test_rewrite_unknown_raises(self) -> None:
        """Unknown never matches an earlier write, even another Unknown."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, witness_required=False)
        table.assign_advice(Cell(advice, 0), Value.unknown())
        with pytest.raises(DuplicateAssignment):
            table.assign_advice(Cell(advice, 0), Value.unknown())

    def test_unknown_in_witness_mode_raises(self) -> None:
        """Witness mode rejects Unknown at write time."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        with pytest.raises(MissingWitness):
            table.assign_advice(Cell(advice, 0), Value.unknown(), "seed")

    def test_unknown_in_keygen_mode_is_stored(self) -> None:
        """Without a witness, Unknown values are kept as placeholders."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, witness_required=False)
        table.assign_advice(Cell(advice, 0), Value.unknown())
        assert table.is_assigned(Cell(advice, 0))
        assert not table.advice_value(Cell(advice, 0)).is_known()

    def test_row_past_usable_rows_raises(self) -> None:
        """k=4 leaves rows 0..9 usable for this gate shape."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        table.assign_advice(Cell(advice, 9), Value.known(1))
        with pytest.raises(NotEnoughRowsAvailable):
            table.assign_advice(Cell(advice, 10), Value.known(1))

    def test_selector_window_bounds(self) -> None:
        """A window reaching row 10 or beyond cannot be opened."""
        meta, _, _, selector = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        table.enable_selector(selector, 7)
        assert table.is_enabled(selector, 7)
        with pytest.raises(OutOfBoundsWindow):
            table.enable_selector(selector, 8)
        assert table.selector_rows(selector) == frozenset({7})

    def test_copy_requires_equality(self) -> None:
        """Copy constraints only touch equality-enabled columns."""
        meta = ConstraintSystem()
        enabled = meta.advice_column()
        plain = meta.advice_column()
        meta.enable_equality(enabled)
        table = Table(meta, 4, instances=[])
        with pytest.raises(InvalidEquality):
            table.copy(Cell(enabled, 0), Cell(plain, 0))

    def test_copy_is_unordered_and_deduplicated(self) -> None:
        """(x, y) and (y, x) are the same constraint."""
        meta, advice, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[1]])
        table.copy(Cell(advice, 0), Cell(instance, 0))
        table.copy(Cell(instance, 0), Cell(advice, 0))
        assert table.copy_constraints() == [(Cell(advice, 0), Cell(instance, 0))]

    def test_instance_values(self) -> None:
        """Instance rows past the vector read zero; keygen tables read Unknown."""
        meta, _, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[1, 2, 3]])
        assert table.instance_value(instance, 2) == Value.known(FF(3))
        assert table.instance_value(instance, 5) == Value.known(FF(0))
        keygen_table = Table(meta, 4, witness_required=False)
        assert not keygen_table.instance_value(instance, 0).is_known()

    def test_instance_vector_too_long(self) -> None:
        """Public inputs must fit in the usable rows."""
        meta, _, _, _ = _single_column_system()
        with pytest.raises(InstanceTooLarge, match=r"instance\[0\] has 11 values"):
            Table(meta, 4, instances=[[1] * 11])

    def test_instance_vector_count_must_match(self) -> None:
        """One vector per instance column."""
        meta, _, _, _ = _single_column_system()
        with pytest.raises(InstanceTooLarge):
            Table(meta, 4, instances=[])

    def test_column_values(self) -> None:
        """Column contents come back as a field array over usable rows."""
        meta, advice, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[4, 5]])
        table.assign_advice(Cell(advice, 1), Value.known(7))
        assert np.array_equal(table.column_values(advice), FF([0, 7, 0, 0, 0, 0, 0, 0, 0, 0]))
        assert np.array_equal(table.column_values(instance), FF([4, 5, 0, 0, 0, 0, 0, 0, 0, 0]))

    def test_frozen_table_rejects_writes(self) -> None:
        """No mutation after freeze()."""
        meta, advice, _, selector = _single_column_system()
        table = Table(meta, 4, instances=[[]]).freeze()
        with pytest.raises(TableFrozen):
            table.assign_advice(Cell(advice, 0), Value.known(1))
        with pytest.raises(TableFrozen):
            table.enable_selector(selector, 0)
        with pytest.raises(TableFrozen):
            table.copy(Cell(advice, 0), Cell(advice, 1))


class TestLayouter:
    """Regions placed through the layouter."""

    def test_regions_are_placed_sequentially(self) -> None:
        """Each region starts where the previous one ended."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        layouter = Layouter(table)

        def two_rows(region):
            region.assign_advice("x", advice, 0, Value.known(1))
            return region.assign_advice("y", advice, 1, Value.known(2))

        first = layouter.assign_region("first", two_rows)
        second = layouter.namespace("ns").assign_region("second", two_rows)

        assert first.cell == Cell(advice, 1)
        assert second.cell == Cell(advice, 3)
        assert [(r.name, r.start, r.end) for r in table.regions] == [
            ("first", 0, 2), ("ns/second", 2, 4),
        ]
        assert table.region_at(3).name == "ns/second"
        assert table.region_at(9) is None

    def test_full_window_in_one_region(self) -> None:
        """A forward-looking gate passes when its window is assigned in the region."""
        meta, advice, _, selector = _single_column_system()
        table = Table(meta, 4, instances=[[]])

        def window(region):
            region.enable_selector(selector, 0)
            for offset, v in enumerate([1, 1, 2]):
                region.assign_advice("v", advice, offset, Value.known(v))

        Layouter(table).assign_region("window", window)
        assert table.selector_rows(selector) == frozenset({0})

    def test_window_split_across_regions_raises(self) -> None:
        """A region may not leave part of an enabled window to a later region."""
        meta, advice, _, selector = _single_column_system()
        table = Table(meta, 4, instances=[[]])

        def partial(region):
            region.enable_selector(selector, 0)
            region.assign_advice("a", advice, 0, Value.known(1))
            region.assign_advice("b", advice, 1, Value.known(1))

        with pytest.raises(OutOfBoundsWindow, match="not assigned"):
            Layouter(table).assign_region("partial", partial)

    def test_selector_on_last_rows_of_minimum_table_raises(self) -> None:
        """At three rows, a selector at row 1 opens a window reading row 3."""
        meta, advice, _, selector = _single_column_system()
        table = Table(meta, 4, instances=[[]])

        def three_rows(region):
            region.enable_selector(selector, 0)
            region.enable_selector(selector, 1)
            for offset, v in enumerate([1, 1, 2]):
                region.assign_advice("v", advice, offset, Value.known(v))

        with pytest.raises(OutOfBoundsWindow):
            Layouter(table).assign_region("table", three_rows)

    def test_assign_from_instance_copies(self) -> None:
        """assign_advice_from_instance writes the public value and links the cells."""
        meta, advice, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[9]])

        cell = Layouter(table).assign_region(
            "seed", lambda region: region.assign_advice_from_instance("a", instance, 0, advice, 0))

        assert cell.value == Value.known(FF(9))
        assert table.copy_constraints() == [(Cell(advice, 0), Cell(instance, 0))]

    def test_copy_advice(self) -> None:
        """copy_advice duplicates the value and records the copy."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        layouter = Layouter(table)
        src = layouter.assign_region(
            "src", lambda region: region.assign_advice("x", advice, 0, Value.known(4)))
        dst = layouter.assign_region(
            "dst", lambda region: src.copy_advice("y", region, advice, 0))

        assert dst.cell == Cell(advice, 1)
        assert dst.value == Value.known(FF(4))
        assert table.copy_constraints() == [(Cell(advice, 0), Cell(advice, 1))]

    def test_constrain_instance_is_idempotent(self) -> None:
        """Exposing the same cell twice records one constraint."""
        meta, advice, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[4]])
        layouter = Layouter(table)
        cell = layouter.assign_region(
            "x", lambda region: region.assign_advice("x", advice, 0, Value.known(4)))

        layouter.constrain_instance(cell, instance, 0)
        layouter.constrain_instance(cell, instance, 0)
        assert len(table.copy_constraints()) == 1

    def test_constrain_instance_unknown_cell_raises(self) -> None:
        """Exposing a cell without a known value fails in witness mode."""
        meta, advice, instance, _ = _single_column_system()
        table = Table(meta, 4, instances=[[4]])
        ghost = AssignedCell(Cell(advice, 0), Value.unknown())
        with pytest.raises(MissingWitness):
            Layouter(table).constrain_instance(ghost, instance, 0)

    def test_constrain_instance_needs_instance_column(self) -> None:
        """The target of an exposure must be an instance column."""
        meta, advice, _, _ = _single_column_system()
        table = Table(meta, 4, instances=[[]])
        cell = AssignedCell(Cell(advice, 0), Value.known(FF(1)))
        with pytest.raises(TypeError):
            Layouter(table).constrain_instance(cell, advice, 0)
