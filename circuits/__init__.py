"""Fibonacci circuits, run parameters, and the command-line driver."""

from circuits.fibonacci import (
    LAYOUTS,
    MIN_ROWS,
    MultiColumnFiboCircuit,
    SingleColumnFiboCircuit,
    fibonacci_term,
    public_inputs,
)
from circuits.params import FiboParams

__all__ = [
    "LAYOUTS",
    "MIN_ROWS",
    "MultiColumnFiboCircuit",
    "SingleColumnFiboCircuit",
    "fibonacci_term",
    "public_inputs",
    "FiboParams",
]
