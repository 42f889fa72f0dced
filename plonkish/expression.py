"""Symbolic gate polynomials.

A gate constraint is a tree of Expression nodes. Leaves are constants,
selector queries, and column queries at a relative Rotation; internal nodes
are negation, sum, product, and scaling by a constant. Python operators build
the tree, so a gate reads the way it is written on paper:

    s = meta.query_selector(selector)
    a = meta.query_advice(col, Rotation.cur())
    b = meta.query_advice(col, Rotation.next())
    c = meta.query_advice(col, Rotation(2))
    s * (a + b - c)

evaluate() folds the tree over a field with caller-supplied resolvers for
each query kind. The circuit code never evaluates; only the mock prover does.
"""

from dataclasses import dataclass
from typing import Callable, Iterator

from plonkish.column import Column, Rotation, Selector


def _lift(value) -> "Expression":
    if isinstance(value, Expression):
        return value
    if isinstance(value, int):
        return Constant(value)
    return NotImplemented


class Expression:
    """Base class of the polynomial tree."""

    def __add__(self, other):
        other = _lift(other)
        if other is NotImplemented:
            return other
        return Sum(self, other)

    def __radd__(self, other):
        other = _lift(other)
        if other is NotImplemented:
            return other
        return Sum(other, self)

    def __sub__(self, other):
        other = _lift(other)
        if other is NotImplemented:
            return other
        return Sum(self, Negated(other))

    def __rsub__(self, other):
        other = _lift(other)
        if other is NotImplemented:
            return other
        return Sum(other, Negated(self))

    def __mul__(self, other):
        if isinstance(other, int):
            return Scaled(self, other)
        other = _lift(other)
        if other is NotImplemented:
            return other
        return Product(self, other)

    def __rmul__(self, other):
        if isinstance(other, int):
            return Scaled(self, other)
        return NotImplemented

    def __neg__(self):
        return Negated(self)

    def evaluate(self, field, selector: Callable, advice: Callable, instance: Callable):
        """Evaluate to a field element.

        Args:
            field: galois field class used for constants
            selector: resolver for SelectorExpr leaves
            advice: resolver for AdviceQuery leaves
            instance: resolver for InstanceQuery leaves
        """
        raise NotImplementedError

    def degree(self) -> int:
        raise NotImplementedError

    def children(self) -> tuple:
        return ()

    def queries(self) -> Iterator["Expression"]:
        """Yield every leaf query (selector, advice, instance) in the tree."""
        for child in self.children():
            yield from child.queries()


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: int

    def evaluate(self, field, selector, advice, instance):
        return field(self.value % field.order)

    def degree(self) -> int:
        return 0

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class SelectorExpr(Expression):
    selector: Selector

    def evaluate(self, field, selector, advice, instance):
        return selector(self)

    def degree(self) -> int:
        return 1

    def queries(self):
        yield self

    def __str__(self) -> str:
        return f"s{self.selector.index}"


@dataclass(frozen=True, eq=False)
class AdviceQuery(Expression):
    column: Column
    rotation: Rotation

    def evaluate(self, field, selector, advice, instance):
        return advice(self)

    def degree(self) -> int:
        return 1

    def queries(self):
        yield self

    def __str__(self) -> str:
        return f"a{self.column.index}[{self.rotation.offset:+d}]"


@dataclass(frozen=True, eq=False)
class InstanceQuery(Expression):
    column: Column
    rotation: Rotation

    def evaluate(self, field, selector, advice, instance):
        return instance(self)

    def degree(self) -> int:
        return 1

    def queries(self):
        yield self

    def __str__(self) -> str:
        return f"i{self.column.index}[{self.rotation.offset:+d}]"


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def evaluate(self, field, selector, advice, instance):
        return -self.inner.evaluate(field, selector, advice, instance)

    def degree(self) -> int:
        return self.inner.degree()

    def children(self) -> tuple:
        return (self.inner,)

    def __str__(self) -> str:
        return f"-{self.inner}"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def evaluate(self, field, selector, advice, instance):
        return (self.left.evaluate(field, selector, advice, instance)
                + self.right.evaluate(field, selector, advice, instance))

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def children(self) -> tuple:
        return (self.left, self.right)

    def __str__(self) -> str:
        if isinstance(self.right, Negated):
            return f"({self.left} - {self.right.inner})"
        return f"({self.left} + {self.right})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def evaluate(self, field, selector, advice, instance):
        return (self.left.evaluate(field, selector, advice, instance)
                * self.right.evaluate(field, selector, advice, instance))

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def children(self) -> tuple:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"{self.left} * {self.right}"


@dataclass(frozen=True, eq=False)
class Scaled(Expression):
    inner: Expression
    factor: int

    def evaluate(self, field, selector, advice, instance):
        factor = field(self.factor % field.order)
        return self.inner.evaluate(field, selector, advice, instance) * factor

    def degree(self) -> int:
        return self.inner.degree()

    def children(self) -> tuple:
        return (self.inner,)

    def __str__(self) -> str:
        return f"{self.factor} * {self.inner}"
