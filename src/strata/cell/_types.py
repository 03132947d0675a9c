"""
Type helpers for AttributeCell.

This module provides:
- Kind: the tagged union of effective cell types
- Classification helpers for raw layer values
- Type aliases for provenance results
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import typing as _typing


class Kind(_enum.Enum):
    """Effective type of a cell, decided by its highest-precedence layer."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


# Strings and bytes are sequences to Python but scalars to a config tree
_SCALAR_SEQUENCES = (str, bytes, bytearray)

# Provenance of a merged value: a layer name, or nested provenance per key/index
if _typing.TYPE_CHECKING:
    Provenance: _typing.TypeAlias = (
        "str | None | dict[_typing.Any, Provenance] | list[str]"
    )
else:
    Provenance: _typing.TypeAlias = object


def is_mapping_value(value: _typing.Any) -> bool:
    """Check if a raw layer value merges as a mapping."""
    return isinstance(value, _abc.Mapping)


def is_sequence_value(value: _typing.Any) -> bool:
    """Check if a raw layer value merges as a sequence (str/bytes excluded)."""
    return isinstance(value, _abc.Sequence) and not isinstance(value, _SCALAR_SEQUENCES)


def is_container_value(value: _typing.Any) -> bool:
    """Check if a raw layer value is a mapping or a sequence."""
    return is_mapping_value(value) or is_sequence_value(value)


def kind_of_value(value: _typing.Any) -> Kind:
    """
    Classify a raw value.

    None, False, 0 and empty strings are all scalars; only real
    containers are mappings or sequences.
    """
    if is_mapping_value(value):
        return Kind.MAPPING
    if is_sequence_value(value):
        return Kind.SEQUENCE
    return Kind.SCALAR
