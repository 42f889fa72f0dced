"""Witness values that may not be supplied yet.

Key derivation runs the same assignment code as proving, but without a
witness. Every cell value is therefore a Value: Known(v) or Unknown, and
arithmetic on Unknown stays Unknown.
"""

from typing import Callable

from plonkish.errors import MissingWitness


class Value:
    """A witness value that is either Known(v) or Unknown.

    Two Values are equal iff both are known and hold equal elements.
    Unknown equals nothing, not even another Unknown.
    """

    __slots__ = ("_inner",)

    def __init__(self, inner=None):
        self._inner = inner

    @classmethod
    def known(cls, inner) -> "Value":
        if inner is None:
            raise TypeError("Value.known() needs an element, use Value.unknown()")
        return cls(inner)

    @classmethod
    def unknown(cls) -> "Value":
        return cls(None)

    def is_known(self) -> bool:
        return self._inner is not None

    def assign(self, what: str = "value"):
        """Return the known element or raise MissingWitness."""
        if self._inner is None:
            raise MissingWitness(f"{what} is unknown")
        return self._inner

    @property
    def inner(self):
        return self.assign()

    def map(self, fn: Callable) -> "Value":
        if self._inner is None:
            return self
        return Value(fn(self._inner))

    def zip(self, other: "Value") -> "Value":
        """Pair with another value; unknown if either side is."""
        if self._inner is None or other._inner is None:
            return Value.unknown()
        return Value((self._inner, other._inner))

    def _combine(self, other, op) -> "Value":
        if not isinstance(other, Value):
            other = Value.known(other)
        return self.zip(other).map(lambda pair: op(*pair))

    def __add__(self, other) -> "Value":
        return self._combine(other, lambda x, y: x + y)

    def __sub__(self, other) -> "Value":
        return self._combine(other, lambda x, y: x - y)

    def __mul__(self, other) -> "Value":
        return self._combine(other, lambda x, y: x * y)

    def __neg__(self) -> "Value":
        return self.map(lambda x: -x)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._inner is None or other._inner is None:
            return False
        return bool(self._inner == other._inner)

    __hash__ = None

    def __repr__(self) -> str:
        if self._inner is None:
            return "Value(unknown)"
        return f"Value({self._inner})"
