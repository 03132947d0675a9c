"""
Exceptions raised by AttributeCell.

Every exception derives from CellError and from the builtin exception a
caller would naturally expect, so `except ValueError` and `except TypeError`
keep working.
"""


class CellError(Exception):
    """Base class for all AttributeCell errors."""

    pass


class UnknownLayerError(CellError, ValueError):
    """Raised when a layer name is not one of the ten precedence layers."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown layer {name!r}")


class UnsupportedConversionError(CellError, TypeError):
    """Raised when converting a cell to a container type it does not hold."""

    def __init__(self, kind: str, target: str) -> None:
        self.kind = kind
        self.target = target
        super().__init__(f"Cannot convert a {kind} cell to {target}")


class ScalarIndexError(CellError, TypeError):
    """Raised when indexing a scalar cell under the 'error' lookup policy."""

    pass
