"""
AttributeCell: precedence-merged configuration values.

A cell holds up to ten layers for one node of a configuration tree and
merges them on demand. Layers are checked in ascending precedence order
(last populated layer = highest priority).

Example:
    >>> from strata.cell import AttributeCell
    >>> cell = AttributeCell(default={"a": {"x": 1}}, override={"a": {"y": 2}})
    >>> cell["a"].to_dict()
    {'x': 1, 'y': 2}
"""

from strata.cell._core import AttributeCell
from strata.cell._errors import (
    CellError,
    ScalarIndexError,
    UnknownLayerError,
    UnsupportedConversionError,
)
from strata.cell._frozen import FrozenMapping, FrozenSequence
from strata.cell._types import Kind

__all__ = [
    "AttributeCell",
    "CellError",
    "FrozenMapping",
    "FrozenSequence",
    "Kind",
    "ScalarIndexError",
    "UnknownLayerError",
    "UnsupportedConversionError",
]
