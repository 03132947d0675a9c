"""Tests for AttributeCell layer storage, type dispatch and impersonation."""

import collections.abc as _abc
import logging as _logging

import pytest as _pytest

import strata.cell as cell
import strata.constants as constants


class TestLayerStorage:
    """Layer construction, assignment and introspection."""

    def test_all_layers_absent_by_default(self) -> None:
        """A fresh cell has every layer absent."""
        node = cell.AttributeCell()

        for component in constants.COMPONENTS:
            assert getattr(node, component) is None
        assert node.highest_precedence() is None
        assert node.winning_layer() is None

    def test_containers_are_stored_frozen(self) -> None:
        """Mappings and sequences are wrapped on assignment."""
        node = cell.AttributeCell(default={"a": 1})
        node.normal = [1, 2]

        assert isinstance(node.default, cell.FrozenMapping)
        assert isinstance(node.normal, cell.FrozenSequence)
        assert node.default["a"] == 1
        assert list(node.normal) == [1, 2]

    def test_frozen_layer_rejects_mutation(self) -> None:
        """A stored layer cannot be mutated through the cell."""
        node = cell.AttributeCell(default={"a": 1})

        with _pytest.raises(TypeError):
            node.default["a"] = 2  # type: ignore[index]

    def test_scalars_are_stored_verbatim(self) -> None:
        """False, 0 and empty strings are kept as-is, not treated as absent."""
        node = cell.AttributeCell(default=0, normal="", override=False)

        assert node.default == 0
        assert node.normal == ""
        assert node.override is False

    def test_reassignment_is_visible_immediately(self) -> None:
        """There is no cached merge to invalidate."""
        node = cell.AttributeCell(default=1)
        assert node == 1

        node.override = 2
        assert node == 2

        node.override = None
        assert node == 1

    def test_from_layers(self) -> None:
        """from_layers builds a cell from a name -> value mapping."""
        node = cell.AttributeCell.from_layers({"env_default": 1, "env_override": 2})

        assert node.env_default == 1
        assert node.env_override == 2
        assert node.highest_precedence() == 2

    def test_from_layers_rejects_unknown_name(self) -> None:
        """An unknown layer name is reported, not dropped."""
        with _pytest.raises(cell.UnknownLayerError) as excinfo:
            cell.AttributeCell.from_layers({"defualt": 1})

        assert excinfo.value.name == "defualt"

    def test_unknown_layer_error_is_value_error(self) -> None:
        """Callers can catch the builtin ValueError."""
        with _pytest.raises(ValueError):
            cell.AttributeCell().set_layer("bogus", 1)

    def test_get_and_set_layer_by_name(self) -> None:
        node = cell.AttributeCell()
        node.set_layer("role_default", {"a": 1})

        assert node.get_layer("role_default") == {"a": 1}
        with _pytest.raises(cell.UnknownLayerError):
            node.get_layer("roles")

    def test_unknown_attribute_assignment_fails(self) -> None:
        """Misspelled layer attributes are not silently created."""
        node = cell.AttributeCell()

        with _pytest.raises(AttributeError):
            node.defualt = 1  # type: ignore[attr-defined]

    def test_get_layer_returns_frozen_view_not_cell(self) -> None:
        """Stored containers are read-only views; cells only come from merges."""
        node = cell.AttributeCell(default={"a": {"x": 1}})

        stored = node.get_layer("default")

        assert isinstance(stored, cell.FrozenMapping)
        assert not isinstance(stored, cell.AttributeCell)
        assert isinstance(node["a"], cell.AttributeCell)

    def test_cell_assigned_as_layer_keeps_its_keys(self) -> None:
        """A mapping cell used as a layer value merges like the mapping it resolves to."""
        inner = cell.AttributeCell(normal={"x": 1})

        node = cell.AttributeCell(default=inner, override={"y": 2})

        assert isinstance(node.default, cell.FrozenMapping)
        assert node.to_dict() == {"x": 1, "y": 2}

    def test_cell_layer_value_is_a_snapshot(self) -> None:
        """Later writes to the assigned cell do not leak into the layer."""
        inner = cell.AttributeCell(default=[1, 2])
        node = cell.AttributeCell()
        node.set_layer("normal", inner)

        inner.override = [9]

        assert node.to_list() == [1, 2]

    def test_scalar_cell_assigned_as_layer(self) -> None:
        node = cell.AttributeCell(default=cell.AttributeCell(default=1, normal=5))

        assert node.default == 5
        assert node.kind is cell.Kind.SCALAR

    def test_layers_lists_populated_layers_in_order(self) -> None:
        node = cell.AttributeCell(automatic=3, default=1, normal=2)

        assert list(node.layers) == ["default", "normal", "automatic"]
        assert dict(node.layers) == {"default": 1, "normal": 2, "automatic": 3}


class TestScalarPrecedence:
    """The highest populated layer wins."""

    def test_four_layers(self) -> None:
        node = cell.AttributeCell(default=1, normal=2, override=3, automatic=4)
        assert node.highest_precedence() == 4

        node.automatic = None
        assert node.highest_precedence() == 3

    @_pytest.mark.parametrize("winner", constants.COMPONENTS)
    def test_every_layer_beats_all_lower_layers(self, winner: str) -> None:
        """Populate every layer up to `winner` with its own index."""
        upto = constants.PRECEDENCE[winner]
        node = cell.AttributeCell.from_layers(
            {name: index for name, index in constants.PRECEDENCE.items() if index <= upto}
        )

        assert node.highest_precedence() == upto
        assert node.winning_layer() == winner

    def test_false_is_not_absent(self) -> None:
        node = cell.AttributeCell(default=True, override=False)

        assert node.highest_precedence() is False
        assert node.winning_layer() == "override"

    def test_none_layer_falls_through(self) -> None:
        node = cell.AttributeCell(default="low", normal=None)

        assert node.highest_precedence() == "low"


class TestTypeDispatch:
    """Effective type follows the highest-precedence layer."""

    def test_empty_cell_is_scalar(self) -> None:
        node = cell.AttributeCell()

        assert node.kind is cell.Kind.SCALAR
        assert node.is_scalar()

    def test_mapping_kind(self) -> None:
        assert cell.AttributeCell(default={"a": 1}).kind is cell.Kind.MAPPING

    def test_sequence_kind(self) -> None:
        assert cell.AttributeCell(default=[1]).kind is cell.Kind.SEQUENCE

    def test_string_is_scalar(self) -> None:
        assert cell.AttributeCell(normal="abc").is_scalar()

    def test_kind_follows_highest_layer(self) -> None:
        assert cell.AttributeCell(default={"a": 1}, override=[1]).is_sequence()
        assert cell.AttributeCell(default=[1], normal=5).is_scalar()
        assert cell.AttributeCell(default=5, automatic={"a": 1}).is_mapping()

    def test_is_a_sees_merged_mapping(self) -> None:
        """A cell wrapping mappings satisfies mapping type checks."""
        node = cell.AttributeCell(default={"a": 1})

        assert node.is_a(dict)
        assert node.is_a(_abc.Mapping)
        assert node.is_a(cell.AttributeCell)
        assert not node.is_a(list)

    def test_is_a_sees_merged_sequence(self) -> None:
        node = cell.AttributeCell(normal=[1])

        assert node.is_a(list)
        assert node.is_a(_abc.Sequence)
        assert not node.is_a(dict)

    def test_is_a_sees_scalar(self) -> None:
        node = cell.AttributeCell(default=1)

        assert node.is_a(int)
        assert node.is_a((str, int))
        assert not node.is_a(str)


class TestForwarding:
    """Operations not defined on the cell go to the merged view."""

    def test_mapping_methods(self) -> None:
        node = cell.AttributeCell(default={"a": 1}, normal={"b": 2})

        assert list(node.keys()) == ["a", "b"]
        assert node.get("b") == 2
        assert node.get("missing", 7) == 7

    def test_scalar_methods(self) -> None:
        assert cell.AttributeCell(normal="abc").upper() == "ABC"

    def test_sequence_methods(self) -> None:
        assert cell.AttributeCell(normal=[3, 1, 3]).count(3) == 2

    def test_missing_attribute_raises(self) -> None:
        with _pytest.raises(AttributeError):
            _ = cell.AttributeCell(default={"a": 1}).no_such_method

    def test_private_attributes_are_not_forwarded(self) -> None:
        with _pytest.raises(AttributeError):
            _ = cell.AttributeCell(default={"a": 1})._data

    def test_dir_includes_forwarded_names(self) -> None:
        names = dir(cell.AttributeCell(default={"a": 1}))

        assert "keys" in names
        assert "to_dict" in names

    def test_len_bool_contains(self) -> None:
        mapping = cell.AttributeCell(default={"a": 1}, override={"b": 2})
        sequence = cell.AttributeCell(normal=[1, 2])

        assert len(mapping) == 2
        assert "a" in mapping
        assert "z" not in mapping
        assert 2 in sequence
        assert bool(mapping)
        assert not cell.AttributeCell()
        assert not cell.AttributeCell(normal=[])

    def test_numeric_and_string_conversion(self) -> None:
        assert str(cell.AttributeCell(normal=5)) == "5"
        assert int(cell.AttributeCell(default="7")) == 7
        assert float(cell.AttributeCell(default=1, override="2.5")) == 2.5

    def test_str_of_mapping_is_plain(self) -> None:
        node = cell.AttributeCell(default={"a": {"b": 1}})

        assert str(node) == "{'a': {'b': 1}}"

    def test_cells_sort_by_resolved_value(self) -> None:
        nodes = [
            cell.AttributeCell(normal=3),
            cell.AttributeCell(default=1),
            cell.AttributeCell(override=2),
        ]

        assert [node.highest_precedence() for node in sorted(nodes)] == [1, 2, 3]
        assert cell.AttributeCell(default=1) < 2

    def test_repr_shows_populated_layers(self) -> None:
        node = cell.AttributeCell(default={"a": [1]}, normal=2)

        assert repr(node) == "AttributeCell(default={'a': [1]}, normal=2)"

    def test_unhashable(self) -> None:
        with _pytest.raises(TypeError):
            hash(cell.AttributeCell(default=1))


class TestIndexing:
    """Indexing goes through the merge for the cell's kind."""

    def test_mapping_lookup(self, scoped_cell: cell.AttributeCell) -> None:
        assert scoped_cell["port"] == 80

    def test_mapping_missing_key(self, scoped_cell: cell.AttributeCell) -> None:
        with _pytest.raises(KeyError):
            _ = scoped_cell["missing"]

    def test_sequence_lookup(self) -> None:
        node = cell.AttributeCell(default=[0], normal=[1, 2, 3])

        assert node[1] == 2
        assert node[-1] == 3
        assert node[0:2] == [1, 2]

    def test_sequence_index_out_of_range(self) -> None:
        with _pytest.raises(IndexError):
            _ = cell.AttributeCell(normal=[1])[5]

    def test_scalar_index_warns_and_returns_value(
        self, caplog: _pytest.LogCaptureFixture
    ) -> None:
        node = cell.AttributeCell(normal="abc")

        with caplog.at_level(_logging.WARNING, logger="strata.cell._core"):
            assert node["anything"] == "abc"

        assert "Indexing scalar cell" in caplog.text

    def test_scalar_index_ignore_policy(
        self, caplog: _pytest.LogCaptureFixture, use_settings
    ) -> None:
        use_settings(lookup={"scalar_index": "ignore"})

        with caplog.at_level(_logging.WARNING, logger="strata.cell._core"):
            assert cell.AttributeCell(default=3)[0] == 3

        assert caplog.records == []

    def test_scalar_index_error_policy(self, use_settings) -> None:
        use_settings(lookup={"scalar_index": "error"})

        with _pytest.raises(cell.ScalarIndexError):
            _ = cell.AttributeCell(default=3)["key"]
