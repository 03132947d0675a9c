"""
Merge algorithms for AttributeCell.

Two strategies, both computed on demand from the current layer contents:

- Mapping merge: one level deep. Every key present in any mapping layer
  gets a fresh cell holding just the layers that define that key, so
  deeper levels are merged lazily when that cell is read. Keys whose
  highest-precedence value is a scalar are exposed as the bare scalar.

- Sequence merge: group-wise replacement, never element-wise. The groups
  are checked from highest to lowest (automatic, override family, normal,
  default family) and the first group holding any sequence wins outright.
  Within a family, the members' sequences are concatenated in family order.

Nested containers inside a merged sequence are wrapped in a cell that only
knows the single layer the element came from. Cross-layer structure below
a sequence element is therefore lost; this is inherent to group-wise
replacement.
"""

from __future__ import annotations

import typing as _typing

import strata.cell._types as _types
import strata.constants as constants

if _typing.TYPE_CHECKING:
    import strata.cell._core as _core

# Sequence groups in the order they are tried (highest precedence first)
SEQUENCE_GROUPS: tuple[tuple[str, ...], ...] = (
    (constants.AUTOMATIC_COMPONENT,),
    constants.OVERRIDE_COMPONENTS,
    (constants.NORMAL_COMPONENT,),
    constants.DEFAULT_COMPONENTS,
)


def merge_mapping(
    cell: _core.AttributeCell,
) -> tuple[dict[_typing.Any, _typing.Any], dict[_typing.Any, str]]:
    """
    Merge the mapping layers of a cell one level deep.

    Args:
        cell: The cell whose layers are merged. Layers that do not hold a
              mapping are skipped.

    Returns:
        Tuple of (merged, winners) where:
        - merged maps each key to a new cell (container values) or to the
          bare scalar that won
        - winners maps each key to the name of the layer that won it
    """
    merged: dict[_typing.Any, _typing.Any] = {}
    highest_value_found: dict[_typing.Any, _typing.Any] = {}
    winners: dict[_typing.Any, str] = {}

    for component in constants.COMPONENTS:
        layer = getattr(cell, component)
        if not _types.is_mapping_value(layer):
            continue
        for key, value in layer.items():
            if key not in merged:
                merged[key] = type(cell)()
            merged[key].set_layer(component, value)
            highest_value_found[key] = value
            winners[key] = component

    # scalars (None, False included) surface undecorated
    for key, value in highest_value_found.items():
        if not _types.is_container_value(value):
            merged[key] = value

    return merged, winners


def sequence_origins(
    cell: _core.AttributeCell,
) -> list[tuple[str, _typing.Any]] | None:
    """
    Pick the winning sequence group and list its elements with their layer.

    Returns:
        List of (layer_name, raw_element) pairs, or None if no group holds a
        sequence. An empty sequence still counts as present.
    """
    for group in SEQUENCE_GROUPS:
        origins = _group_sequence(cell, group)
        if origins is not None:
            return origins
    return None


def _group_sequence(
    cell: _core.AttributeCell,
    group: tuple[str, ...],
) -> list[tuple[str, _typing.Any]] | None:
    """Concatenate the sequences held by the members of one group."""
    sequences = [
        (component, getattr(cell, component))
        for component in group
        if _types.is_sequence_value(getattr(cell, component))
    ]
    if not sequences:
        return None
    return [(component, value) for component, sequence in sequences for value in sequence]


def merge_sequence(cell: _core.AttributeCell) -> list[_typing.Any] | None:
    """
    Merge the sequence layers of a cell by group-wise replacement.

    Returns:
        The merged list, or None if no layer holds a sequence. Container
        elements become new cells populated only on their originating layer.
    """
    origins = sequence_origins(cell)
    if origins is None:
        return None
    return [
        type(cell).from_layers({component: value})
        if _types.is_container_value(value)
        else value
        for component, value in origins
    ]
