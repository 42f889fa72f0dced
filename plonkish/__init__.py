"""Plonkish arithmetization: tables, gates, copy constraints.

This package provides:
- Column, Selector, Rotation, and Cell descriptors
- Gate polynomials built from column queries at relative rotations
- ConstraintSystem for declaring a circuit's static shape
- Table / Region / Layouter for witness assignment
- MockProver, the constraint-checking oracle used in tests
- keygen for deriving a witness-free circuit key
"""

from plonkish.circuit import Circuit, synthesize_table
from plonkish.column import Cell, Column, ColumnType, Rotation, Selector
from plonkish.constraint_system import ConstraintSystem, Gate, VirtualCells
from plonkish.errors import (
    ConstraintViolation,
    DuplicateAssignment,
    InstanceTooLarge,
    InvalidEquality,
    MissingWitness,
    NotEnoughRowsAvailable,
    OutOfBoundsWindow,
    PlonkishError,
    TableFrozen,
)
from plonkish.expression import Expression
from plonkish.keygen import CircuitKey, keygen
from plonkish.layouter import AssignedCell, Layouter, Region, RegionInfo, Table
from plonkish.mock_prover import FailureKind, MockProver, VerifyFailure
from plonkish.value import Value

__all__ = [
    # Descriptors
    "Cell",
    "Column",
    "ColumnType",
    "Rotation",
    "Selector",
    # Configuration
    "ConstraintSystem",
    "Expression",
    "Gate",
    "VirtualCells",
    # Assignment
    "AssignedCell",
    "Layouter",
    "Region",
    "RegionInfo",
    "Table",
    "Value",
    # Circuits
    "Circuit",
    "synthesize_table",
    "CircuitKey",
    "keygen",
    # Oracle
    "FailureKind",
    "MockProver",
    "VerifyFailure",
    # Errors
    "PlonkishError",
    "MissingWitness",
    "InvalidEquality",
    "OutOfBoundsWindow",
    "ConstraintViolation",
    "DuplicateAssignment",
    "NotEnoughRowsAvailable",
    "InstanceTooLarge",
    "TableFrozen",
]
