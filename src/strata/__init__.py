"""
Strata - precedence-merged configuration values.

Resolves a configuration value supplied by up to ten fixed-priority layers
(defaults, operator values, overrides, discovered facts) into one merged
view, while keeping every layer available for inspection.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("strata")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Strata Contributors"

from strata.cell import AttributeCell, Kind  # noqa: E402
from strata.config import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "AttributeCell", "Kind", "Settings"]
