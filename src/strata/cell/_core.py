"""
AttributeCell: one node of a configuration tree, holding ten precedence layers.

Each layer is supplied by a different owner (built-in defaults, role and
environment defaults, operator values, overrides at several scopes,
discovered facts). The cell merges them on every read; nothing is cached,
so re-assigning a layer is visible immediately.

Read semantics:
- Scalars: the highest-precedence non-None layer wins
- Mappings: merged one level deep; nested values come back as new cells
  scoped to that key (see _merge)
- Sequences: the highest group holding a sequence replaces everything
  below it (see _merge)

There are two ways to misuse this API:

1. Replacing an interior mapping/sequence with a bare scalar (especially
   None) on one layer hides every lower layer's structure at that key.
2. Assigning layers on cells returned by a merge. Those cells are fresh
   per read; writes to them are lost. Always write through the owning
   top-level cell.

Thread safety: none. Callers sharing a mutable cell must synchronize.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import strata.cell._encoding as _encoding
import strata.cell._errors as _errors
import strata.cell._frozen as _frozen
import strata.cell._merge as _merge
import strata.cell._types as _types
import strata.config as config
import strata.constants as constants

_logger = _logging.getLogger(__name__)


class _LayerSlot:
    """
    Descriptor for one precedence layer; freezes containers on assignment.

    Container values are stored as read-only FrozenMapping/FrozenSequence
    views, not as cells, so get_layer() and attribute reads return those
    views. Cells are only built when a merge reads through a layer. A cell
    assigned as a layer value is stored as its deep plain value.
    """

    __slots__ = ("_attr",)

    def __set_name__(self, owner: type, name: str) -> None:
        self._attr = f"_{name}"

    @_typing.overload
    def __get__(self, instance: None, owner: type) -> _LayerSlot: ...

    @_typing.overload
    def __get__(self, instance: AttributeCell, owner: type) -> _typing.Any: ...

    def __get__(self, instance: AttributeCell | None, owner: type) -> _typing.Any:
        if instance is None:
            return self
        return getattr(instance, self._attr)

    def __set__(self, instance: AttributeCell, value: _typing.Any) -> None:
        setattr(instance, self._attr, _frozen.freeze(_to_plain(value)))


def _check_layer_name(name: str) -> None:
    if name not in constants.PRECEDENCE:
        _logger.debug("Rejecting unknown layer %r", name)
        raise _errors.UnknownLayerError(name)


def _to_plain(value: _typing.Any) -> _typing.Any:
    if isinstance(value, AttributeCell):
        return value.to_plain()
    return value


def _unwrap(value: _typing.Any) -> _typing.Any:
    """Return the merged view of a cell, or the value itself."""
    if isinstance(value, AttributeCell):
        return value._as_simple_object()
    return value


def _strict_equal(left: _typing.Any, right: _typing.Any) -> bool:
    if isinstance(left, AttributeCell):
        return left.strict_equals(right)
    if isinstance(right, AttributeCell):
        return False
    return type(left) is type(right) and bool(left == right)


class _CellIterable:
    """Restartable iterable over a cell's merged items."""

    __slots__ = ("_cell",)

    def __init__(self, cell: AttributeCell) -> None:
        self._cell = cell

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return self._cell._iter_items()

    def __repr__(self) -> str:
        return f"<each of {self._cell!r}>"


class AttributeCell:
    """
    Precedence-merged value built from ten named layers.

    A cell behaves as a mapping, a sequence or a scalar depending on its
    highest-precedence populated layer (see `kind`). Indexing, iteration,
    equality and conversion all go through the merged view; attributes not
    defined here are looked up on the merged view, so a mapping cell offers
    `keys()`, `get()`, `items()` like a dict.

    Example:
        >>> cell = AttributeCell(
        ...     default={"port": 80, "tls": {"enabled": False}},
        ...     override={"tls": {"enabled": True}},
        ... )
        >>> cell["port"]
        80
        >>> cell["tls"]["enabled"]
        True
        >>> cell.to_dict()
        {'port': 80, 'tls': {'enabled': True}}

    Layers, lowest precedence first: default, env_default, role_default,
    force_default, normal, override, role_override, env_override,
    force_override, automatic. None means the layer is absent.
    """

    __slots__ = tuple(f"_{component}" for component in constants.COMPONENTS)

    default = _LayerSlot()
    env_default = _LayerSlot()
    role_default = _LayerSlot()
    force_default = _LayerSlot()
    normal = _LayerSlot()
    override = _LayerSlot()
    role_override = _LayerSlot()
    env_override = _LayerSlot()
    force_override = _LayerSlot()
    automatic = _LayerSlot()

    def __init__(
        self,
        *,
        default: _typing.Any = None,
        env_default: _typing.Any = None,
        role_default: _typing.Any = None,
        force_default: _typing.Any = None,
        normal: _typing.Any = None,
        override: _typing.Any = None,
        role_override: _typing.Any = None,
        env_override: _typing.Any = None,
        force_override: _typing.Any = None,
        automatic: _typing.Any = None,
    ) -> None:
        self.default = default
        self.env_default = env_default
        self.role_default = role_default
        self.force_default = force_default
        self.normal = normal
        self.override = override
        self.role_override = role_override
        self.env_override = env_override
        self.force_override = force_override
        self.automatic = automatic

    @classmethod
    def from_layers(cls, layers: _abc.Mapping[str, _typing.Any]) -> AttributeCell:
        """
        Create a cell from a {layer_name: value} mapping.

        Raises:
            UnknownLayerError: If a name is not one of the ten layers.
        """
        for name in layers:
            _check_layer_name(name)
        return cls(**layers)

    # =========================================================================
    # Layer access
    # =========================================================================

    def get_layer(self, name: str) -> _typing.Any:
        """Return the stored value of a layer (None if absent)."""
        _check_layer_name(name)
        return getattr(self, name)

    def set_layer(self, name: str, value: _typing.Any) -> None:
        """Assign a layer by name. Containers are stored as frozen views."""
        _check_layer_name(name)
        setattr(self, name, value)

    @property
    def layers(self) -> _frozen.FrozenMapping:
        """Read-only mapping of the populated layers, lowest precedence first."""
        return _frozen.FrozenMapping(
            {
                component: getattr(self, component)
                for component in constants.COMPONENTS
                if getattr(self, component) is not None
            }
        )

    def highest_precedence(self) -> _typing.Any:
        """Return the value of the highest-precedence populated layer."""
        value = None
        for component in constants.COMPONENTS:
            layer = getattr(self, component)
            if layer is not None:
                value = layer
        return value

    def winning_layer(self) -> str | None:
        """Return the name of the highest-precedence populated layer."""
        winner = None
        for component in constants.COMPONENTS:
            if getattr(self, component) is not None:
                winner = component
        return winner

    # =========================================================================
    # Type dispatch
    # =========================================================================

    @property
    def kind(self) -> _types.Kind:
        """Effective type, decided by the highest-precedence layer."""
        return _types.kind_of_value(self.highest_precedence())

    def is_mapping(self) -> bool:
        return self.kind is _types.Kind.MAPPING

    def is_sequence(self) -> bool:
        return self.kind is _types.Kind.SEQUENCE

    def is_scalar(self) -> bool:
        return self.kind is _types.Kind.SCALAR

    def is_a(self, cls: type | tuple[type, ...]) -> bool:
        """
        Type check that sees through the cell.

        True if the cell itself, its highest-precedence value, or its merged
        view is an instance of cls. A cell holding mappings therefore passes
        `is_a(dict)` and `is_a(collections.abc.Mapping)`.
        """
        if isinstance(self, cls):
            return True
        if isinstance(self.highest_precedence(), cls):
            return True
        return isinstance(self._as_simple_object(), cls)

    def _as_simple_object(self) -> _typing.Any:
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            return self.merged_mapping()
        if kind is _types.Kind.SEQUENCE:
            return self.merged_sequence()
        return self.highest_precedence()

    # =========================================================================
    # Merged views
    # =========================================================================

    def merged_mapping(self) -> dict[_typing.Any, _typing.Any]:
        """
        Merge the mapping layers one level deep.

        Container values come back as new cells holding just the layers
        that define that key; scalar values come back bare.
        """
        merged, _ = _merge.merge_mapping(self)
        return merged

    def merged_sequence(self) -> list[_typing.Any] | None:
        """Merge the sequence layers by group-wise replacement (None if none)."""
        return _merge.merge_sequence(self)

    def combined_default(self) -> AttributeCell:
        """New cell holding only the default-family layers."""
        return type(self).from_layers(
            {component: getattr(self, component) for component in constants.DEFAULT_COMPONENTS}
        )

    def combined_override(self) -> AttributeCell:
        """New cell holding only the override-family layers."""
        return type(self).from_layers(
            {component: getattr(self, component) for component in constants.OVERRIDE_COMPONENTS}
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        """
        Look up a key (mapping cell) or an index/slice (sequence cell).

        Raises:
            KeyError: Key not present in any mapping layer.
            IndexError: Index outside the merged sequence.
            ScalarIndexError: Scalar cell indexed under the 'error' policy.
        """
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            return self.merged_mapping()[key]
        if kind is _types.Kind.SEQUENCE:
            return _typing.cast(list[_typing.Any], self.merged_sequence())[key]
        return self._scalar_index(key)

    def _scalar_index(self, key: _typing.Any) -> _typing.Any:
        # callers that don't know the cell's kind get the resolved value back
        value = self.highest_precedence()
        policy = config.get_settings().lookup.scalar_index
        if policy == "error":
            raise _errors.ScalarIndexError(
                f"Cannot index scalar cell (value {value!r}) with {key!r}"
            )
        if policy == "warn":
            _logger.warning(
                "Indexing scalar cell with %r; returning resolved value %r", key, value
            )
        return value

    def __contains__(self, item: object) -> bool:
        return item in self._as_simple_object()

    def __len__(self) -> int:
        return len(self._as_simple_object())

    def __bool__(self) -> bool:
        return bool(self._as_simple_object())

    def __getattr__(self, name: str) -> _typing.Any:
        """Forward public attribute lookups to the merged view."""
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._as_simple_object(), name)

    def __dir__(self) -> list[str]:
        forwarded = [name for name in dir(self._as_simple_object()) if not name.startswith("_")]
        return sorted(set(super().__dir__()) | set(forwarded))

    # =========================================================================
    # Iteration
    # =========================================================================

    def each(
        self,
        callback: _typing.Callable[..., _typing.Any] | None = None,
    ) -> _CellIterable | None:
        """
        Iterate the merged view.

        Mapping cells produce (key, value) pairs, sequence cells their
        elements, scalar cells the single resolved value.

        Args:
            callback: Called per item; with (key, value) for mapping cells,
                      with the item otherwise. If omitted, a restartable
                      iterable is returned instead.
        """
        if callback is None:
            return _CellIterable(self)
        is_mapping = self.is_mapping()
        for item in self._iter_items():
            if is_mapping:
                callback(*item)
            else:
                callback(item)
        return None

    def _iter_items(self) -> _typing.Iterator[_typing.Any]:
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            yield from self.merged_mapping().items()
        elif kind is _types.Kind.SEQUENCE:
            yield from _typing.cast(list[_typing.Any], self.merged_sequence())
        else:
            yield self.highest_precedence()

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return self._iter_items()

    # =========================================================================
    # Equality and ordering
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        """
        Compare the merged view against a plain value or another cell.

        Mapping cells need the same keys with equal values, sequence cells
        the same length with positionally equal elements. Incompatible
        types are simply unequal.
        """
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            if not _is_mapping_like(other):
                return False
            other_mapping = _typing.cast(_abc.Mapping[_typing.Any, _typing.Any], other)
            merged = self.merged_mapping()
            if len(merged) != len(other_mapping):
                return False
            for key, value in merged.items():
                if key not in other_mapping or not value == other_mapping[key]:
                    return False
            return True
        if kind is _types.Kind.SEQUENCE:
            if not _is_sequence_like(other):
                return False
            other_sequence = _typing.cast(_abc.Sequence[_typing.Any], other)
            merged_list = _typing.cast(list[_typing.Any], self.merged_sequence())
            if len(merged_list) != len(other_sequence):
                return False
            return all(value == other_sequence[i] for i, value in enumerate(merged_list))
        if isinstance(other, AttributeCell):
            if not other.is_scalar():
                return False
            other = other.highest_precedence()
        return bool(self.highest_precedence() == other)

    def strict_equals(self, other: object) -> bool:
        """
        Equality that also requires matching concrete types.

        The other side must literally be a plain mapping, a plain sequence,
        or a scalar of exactly the same type (1 does not strictly equal 1.0).
        Cells on the other side never compare strictly equal.
        """
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            if isinstance(other, AttributeCell) or not _types.is_mapping_value(other):
                return False
            other_mapping = _typing.cast(_abc.Mapping[_typing.Any, _typing.Any], other)
            merged = self.merged_mapping()
            if len(merged) != len(other_mapping):
                return False
            return all(
                key in other_mapping and _strict_equal(value, other_mapping[key])
                for key, value in merged.items()
            )
        if kind is _types.Kind.SEQUENCE:
            if isinstance(other, AttributeCell) or not _types.is_sequence_value(other):
                return False
            other_sequence = _typing.cast(_abc.Sequence[_typing.Any], other)
            merged_list = _typing.cast(list[_typing.Any], self.merged_sequence())
            if len(merged_list) != len(other_sequence):
                return False
            return all(
                _strict_equal(value, other_sequence[i]) for i, value in enumerate(merged_list)
            )
        return _strict_equal(self.highest_precedence(), other)

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")

    def __lt__(self, other: object) -> bool:
        return bool(self._as_simple_object() < _unwrap(other))

    def __le__(self, other: object) -> bool:
        return bool(self._as_simple_object() <= _unwrap(other))

    def __gt__(self, other: object) -> bool:
        return bool(self._as_simple_object() > _unwrap(other))

    def __ge__(self, other: object) -> bool:
        return bool(self._as_simple_object() >= _unwrap(other))

    # =========================================================================
    # Conversion
    # =========================================================================

    def __str__(self) -> str:
        return str(self.to_plain())

    def __int__(self) -> int:
        return int(self._as_simple_object())

    def __float__(self) -> float:
        return float(self._as_simple_object())

    def __repr__(self) -> str:
        content = ", ".join(
            f"{component}={_frozen.thaw(value)!r}" for component, value in self.layers.items()
        )
        return f"{type(self).__name__}({content})"

    def to_dict(self) -> dict[_typing.Any, _typing.Any]:
        """
        Deep-convert a mapping cell to a plain dict.

        An all-absent cell converts to {}.

        Raises:
            UnsupportedConversionError: If the cell is a sequence or a
                non-None scalar.
        """
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            return {key: _to_plain(value) for key, value in self.merged_mapping().items()}
        if self.highest_precedence() is None:
            return {}
        _logger.debug("Refusing to convert %s cell to dict", kind.value)
        raise _errors.UnsupportedConversionError(kind.value, "dict")

    def to_list(self) -> list[_typing.Any]:
        """
        Deep-convert a sequence cell to a plain list.

        An all-absent cell converts to [].

        Raises:
            UnsupportedConversionError: If the cell is a mapping or a
                non-None scalar.
        """
        kind = self.kind
        if kind is _types.Kind.SEQUENCE:
            merged = _typing.cast(list[_typing.Any], self.merged_sequence())
            return [_to_plain(value) for value in merged]
        if self.highest_precedence() is None:
            return []
        _logger.debug("Refusing to convert %s cell to list", kind.value)
        raise _errors.UnsupportedConversionError(kind.value, "list")

    def to_plain(self) -> _typing.Any:
        """Deep-convert to whatever plain value the cell resolves to."""
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            return self.to_dict()
        if kind is _types.Kind.SEQUENCE:
            return self.to_list()
        return self.highest_precedence()

    def to_json(self, **kwargs: _typing.Any) -> str:
        """Encode the merged value as JSON (options override settings.encoding)."""
        return _encoding.encode_json(self.to_plain(), **kwargs)

    def to_yaml(self, **kwargs: _typing.Any) -> str:
        """Encode the merged value as YAML."""
        return _encoding.encode_yaml(self.to_plain(), **kwargs)

    # =========================================================================
    # Introspection
    # =========================================================================

    def provenance(self) -> _types.Provenance:
        """
        Report which layer supplied each part of the merged value.

        Returns:
            - mapping cell: {key: layer_name or nested provenance}
            - sequence cell: [layer_name per element]
            - scalar cell: the winning layer name (None if all absent)

        Example:
            >>> AttributeCell(default={"a": 1, "b": 2}, normal={"b": 3}).provenance()
            {'a': 'default', 'b': 'normal'}
        """
        kind = self.kind
        if kind is _types.Kind.MAPPING:
            merged, winners = _merge.merge_mapping(self)
            return {
                key: value.provenance() if isinstance(value, AttributeCell) else winners[key]
                for key, value in merged.items()
            }
        if kind is _types.Kind.SEQUENCE:
            origins = _merge.sequence_origins(self) or []
            return [component for component, _ in origins]
        return self.winning_layer()

    def debug_value(self) -> list[tuple[str, _typing.Any]]:
        """Return (layer_name, plain_value) for all ten layers, lowest first."""
        return [
            (component, _frozen.thaw(getattr(self, component)))
            for component in constants.COMPONENTS
        ]


def _is_mapping_like(value: object) -> bool:
    if isinstance(value, AttributeCell):
        return value.is_mapping()
    return _types.is_mapping_value(value)


def _is_sequence_like(value: object) -> bool:
    if isinstance(value, AttributeCell):
        return value.is_sequence()
    return _types.is_sequence_value(value)


_encoding.CellDumper.add_multi_representer(AttributeCell, _encoding.represent_cell)
