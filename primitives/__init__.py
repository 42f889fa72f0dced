"""Primitives - Low-level mathematical building blocks."""

from primitives.field import (
    FF,
    FIELDS,
    GOLDILOCKS_PRIME,
    PALLAS_BASE_PRIME,
    get_field,
    pallas_base_field,
    to_field,
)

__all__ = [
    # Field
    "FF",
    "FIELDS",
    "GOLDILOCKS_PRIME",
    "PALLAS_BASE_PRIME",
    "get_field",
    "pallas_base_field",
    "to_field",
]
