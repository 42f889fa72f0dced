"""Run parameters for the Fibonacci circuits.

Example:
    params = FiboParams.from_json("fibo.json")
    prover = MockProver.run(params.k, params.circuit(), params.instances(),
                            field=params.field_class())
"""

import json
from dataclasses import asdict, dataclass, fields
from typing import List, Optional

from chips.base import PUBLIC_OUTPUT_ROW
from circuits.fibonacci import LAYOUTS, MIN_ROWS, MultiColumnFiboCircuit, public_inputs
from plonkish import Circuit
from primitives.field import FIELDS, get_field


@dataclass
class FiboParams:
    """One witness cycle: layout, table size, seeds, and claimed output.

    Attributes:
        k: log2 of the table height
        n_rows: number of sequence terms proven
        layout: 'multi' (three advice columns) or 'single' (one column)
        field: registered field name
        a: first seed
        b: second seed
        output: claimed last term, None to use the correct one
    """
    k: int = 4
    n_rows: int = 10
    layout: str = "multi"
    field: str = "goldilocks"
    a: int = 1
    b: int = 1
    output: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FiboParams":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown parameter(s): {sorted(unknown)}")
        params = cls(**data)
        params.validate()
        return params

    @classmethod
    def from_json(cls, path) -> "FiboParams":
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> None:
        for name in ("k", "n_rows", "a", "b"):
            if not isinstance(getattr(self, name), int):
                raise ValueError(f"{name} must be an integer, got {getattr(self, name)!r}")
        if self.output is not None and not isinstance(self.output, int):
            raise ValueError(f"output must be an integer or null, got {self.output!r}")
        if not isinstance(self.layout, str) or not isinstance(self.field, str):
            raise ValueError("layout and field must be strings")
        if self.layout not in LAYOUTS:
            raise ValueError(f"layout must be one of {list(LAYOUTS)}, got '{self.layout}'")
        if self.field not in FIELDS:
            raise ValueError(f"field must be one of {list(FIELDS)}, got '{self.field}'")
        if self.n_rows < MIN_ROWS:
            raise ValueError(f"n_rows must be >= {MIN_ROWS}, got {self.n_rows}")
        if self.k < 1:
            raise ValueError(f"k must be >= 1, got {self.k}")

    def field_class(self):
        return get_field(self.field)

    def circuit(self) -> Circuit:
        if self.layout == "multi":
            return MultiColumnFiboCircuit(self.a, self.b, n_rows=self.n_rows)
        return LAYOUTS[self.layout](n_rows=self.n_rows)

    def instances(self) -> List[List[int]]:
        values = public_inputs(self.a, self.b, self.n_rows)
        if self.output is not None:
            values[PUBLIC_OUTPUT_ROW] = self.output
        return [values]
