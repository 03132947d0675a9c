"""
Text encoding hand-off for merged cells.

Cells are first converted to plain dicts/lists/scalars by the caller; this
module only applies the configured encoder options and delegates to the
stdlib json encoder or to PyYAML.
"""

from __future__ import annotations

import json as _json
import typing as _typing

import yaml as _yaml

import strata.config as config

if _typing.TYPE_CHECKING:
    import strata.cell._core as _core


class CellDumper(_yaml.SafeDumper):
    """
    SafeDumper that also represents AttributeCell values.

    Allows dumping plain structures that still contain cells, e.g. a
    registry's dict of top-level cells.
    """

    pass


def represent_cell(dumper: CellDumper, cell: _core.AttributeCell) -> _yaml.Node:
    """Represent a cell as its fully merged plain value."""
    return dumper.represent_data(cell.to_plain())


def encode_json(data: _typing.Any, **kwargs: _typing.Any) -> str:
    """
    Encode plain data as JSON.

    Args:
        data: Plain dicts, lists and scalars (None encodes as null).
        **kwargs: json.dumps options, overriding the configured defaults.
    """
    options = config.get_settings().encoding.json_kwargs()
    options.update(kwargs)
    return _json.dumps(data, **options)


def encode_yaml(data: _typing.Any, **kwargs: _typing.Any) -> str:
    """
    Encode data as YAML with CellDumper.

    Args:
        data: Plain data, possibly containing cells.
        **kwargs: yaml.dump options.
    """
    options: dict[str, _typing.Any] = {"default_flow_style": False, "sort_keys": False}
    options.update(kwargs)
    return _yaml.dump(data, Dumper=CellDumper, **options)
