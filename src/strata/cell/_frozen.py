"""
Read-only wrappers for layer containers.

A mapping or sequence assigned to a cell layer is stored through one of
these views, so the layer can never be mutated through the cell and so
merge code only ever sees wrapped containers. Nested containers are
frozen on access.

FrozenMapping wraps mappings, FrozenSequence wraps lists and tuples.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import strata.cell._types as _types


class FrozenMapping(_abc.Mapping[_typing.Any, _typing.Any]):
    """
    Read-only view of a mapping layer.

    Example:
        >>> frozen = FrozenMapping({"a": {"b": [1, 2, 3]}})
        >>> frozen["a"]["b"][0]
        1
        >>> frozen["a"]["b"][0] = 99  # TypeError: immutable
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Mapping[_typing.Any, _typing.Any]) -> None:
        """
        Wrap a mapping in a read-only view.

        Args:
            data: The mapping to wrap. A dict is used directly (not copied),
                  any other mapping is converted to a dict.
        """
        self._data = data if isinstance(data, dict) else dict(data)

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        """Get a value, freezing nested containers."""
        return freeze(self._data[key])

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrozenMapping({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with same content."""
        if isinstance(other, _abc.Mapping):
            return dict(self) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class FrozenSequence(_abc.Sequence[_typing.Any]):
    """
    Read-only view of a sequence layer.

    Example:
        >>> frozen = FrozenSequence([{"a": 1}, {"b": 2}])
        >>> frozen[0]["a"]
        1
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Sequence[_typing.Any]) -> None:
        """
        Wrap a sequence in a read-only view.

        Args:
            data: The sequence to wrap. A list is used directly (not copied),
                  any other sequence is converted to a list.
        """
        self._data = data if isinstance(data, list) else list(data)

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> FrozenSequence: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        """Get an item or slice, freezing nested containers."""
        value = self._data[index]
        if isinstance(index, slice):
            return FrozenSequence(value)
        return freeze(value)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrozenSequence({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Sequence with same content (except strings)."""
        if _types.is_sequence_value(other):
            return list(self) == list(_typing.cast(_abc.Sequence[_typing.Any], other))
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


def freeze(value: _typing.Any) -> _typing.Any:
    """
    Wrap containers in frozen views.

    - Mapping -> FrozenMapping
    - list/tuple/other Sequence -> FrozenSequence (except str/bytes)
    - Already frozen values and scalars are returned unchanged

    Example:
        >>> freeze({"a": [1, 2]})
        FrozenMapping({'a': [1, 2]})
        >>> freeze("string")
        'string'
    """
    if isinstance(value, (FrozenMapping, FrozenSequence)):
        return value
    if _types.is_mapping_value(value):
        return FrozenMapping(value)
    if _types.is_sequence_value(value):
        return FrozenSequence(value)
    return value


def thaw(value: _typing.Any) -> _typing.Any:
    """
    Copy frozen views back out into plain dicts and lists.

    The inverse of freeze() for display and debugging; scalars are
    returned unchanged.
    """
    if isinstance(value, FrozenMapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, FrozenSequence):
        return [thaw(item) for item in value]
    return value
