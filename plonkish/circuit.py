"""Base class for circuits and the synthesis driver."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Tuple

from plonkish.constraint_system import ConstraintSystem
from plonkish.layouter import Layouter, Table
from primitives.field import FF


class Circuit(ABC):
    """A circuit: a witness-free configuration plus a synthesis routine.

    configure() declares columns, selectors, and gates only. synthesize()
    fills a table for one concrete witness using the config configure()
    returned. The same config serves every witness.
    """

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Same circuit with every private input Unknown."""
        pass

    @classmethod
    @abstractmethod
    def configure(cls, meta: ConstraintSystem) -> Any:
        """Declare the circuit's shape on meta and return its config."""
        pass

    @abstractmethod
    def synthesize(self, config: Any, layouter: Layouter) -> None:
        """Assign the table through layouter."""
        pass


def synthesize_table(
    circuit: Circuit,
    k: int,
    instances: Optional[Sequence[Sequence]] = None,
    field=FF,
    witness_required: bool = True,
) -> Tuple[ConstraintSystem, Any, Table]:
    """Configure circuit, run one assignment pass, and freeze the table.

    Args:
        circuit: Circuit to synthesize
        k: log2 of the table height
        instances: one public-input vector per instance column, None when
            deriving keys without a witness
        field: galois field class
        witness_required: reject Unknown cell values

    Returns:
        (constraint system, config, frozen table)
    """
    meta = ConstraintSystem(field)
    config = type(circuit).configure(meta)
    table = Table(meta, k, instances=instances, witness_required=witness_required)
    circuit.synthesize(config, Layouter(table))
    return meta, config, table.freeze()
