"""
Shared fixtures for AttributeCell tests.
"""

import pytest as _pytest

import strata.cell as cell


@_pytest.fixture
def scoped_cell() -> cell.AttributeCell:
    """Two layers contributing different sub-keys under the same key."""
    return cell.AttributeCell(
        default={"a": {"x": 1}, "port": 80},
        override={"a": {"y": 2}},
    )


@_pytest.fixture
def nested_cell() -> cell.AttributeCell:
    """Three-level structure with a deep override."""
    return cell.AttributeCell(
        default={"root": {"level1": {"keep": True, "value": "low"}}},
        role_override={"root": {"level1": {"value": "high"}}},
    )
