"""Prime fields GF(p) for circuit arithmetic.

Uses galois library for all field arithmetic. FF is the default field.

Circuit code is written against any galois prime field class: it constructs
elements from ints and uses +, -, * and the field order, nothing else. That is
the whole field contract, so FF can be swapped for the Pallas base field (the
field halo2 circuits run over) without touching gates or chips.
"""

from functools import lru_cache
from typing import Type

import galois

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""

PALLAS_BASE_PRIME = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
PALLAS_GENERATOR = 5


@lru_cache(maxsize=None)
def pallas_base_field() -> Type[galois.FieldArray]:
    """Pallas base field Fp.

    Built on first use. The multiplicative generator is supplied and not
    verified, since verifying it means factoring p - 1.
    """
    return galois.GF(PALLAS_BASE_PRIME, primitive_element=PALLAS_GENERATOR, verify=False)


# --- Field Registry ---

FIELDS = {
    "goldilocks": lambda: FF,
    "pallas": pallas_base_field,
}


def get_field(name: str) -> Type[galois.FieldArray]:
    """Get field class by name.

    Args:
        name: Registered field name (e.g., 'goldilocks', 'pallas')

    Returns:
        galois FieldArray subclass

    Raises:
        KeyError: If no field is registered under name
    """
    if name not in FIELDS:
        raise KeyError(
            f"Unknown field '{name}'. "
            f"Available: {list(FIELDS.keys())}"
        )
    return FIELDS[name]()


def to_field(field: Type[galois.FieldArray], value) -> galois.FieldArray:
    """Coerce an int or field element into field, reducing mod the order."""
    return field(int(value) % field.order)
