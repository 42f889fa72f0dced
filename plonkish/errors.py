"""Errors raised while configuring, assigning, and checking a circuit.

Every error is raised to the immediate caller. Nothing in the circuit code
catches these: each one means malformed input or a construction defect.
"""


class PlonkishError(Exception):
    """Base class for circuit errors."""


class MissingWitness(PlonkishError):
    """An Unknown value reached a cell that needs a Known one."""


class InvalidEquality(PlonkishError):
    """A copy constraint touched a column that is not equality-enabled."""


class OutOfBoundsWindow(PlonkishError):
    """A gate window would read rows outside the table or never assigned."""


class DuplicateAssignment(PlonkishError):
    """A cell was written twice with different (or unknown) values."""


class NotEnoughRowsAvailable(PlonkishError):
    """The table has too few usable rows for the requested layout."""


class InstanceTooLarge(PlonkishError):
    """Public inputs do not fit the instance columns."""


class TableFrozen(PlonkishError):
    """The table was mutated after assignment finished."""


class ConstraintViolation(PlonkishError):
    """The oracle found assigned values that break a gate or copy constraint.

    Attributes:
        failures: list of VerifyFailure reported by the mock prover
    """

    def __init__(self, failures):
        self.failures = list(failures)
        lines = "\n".join(f"  {f}" for f in self.failures)
        super().__init__(f"{len(self.failures)} constraint failure(s):\n{lines}")
