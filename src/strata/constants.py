"""
Layer names and precedence groups for Strata.

This module provides a single source of truth for the ten precedence
layers and the families they are grouped into.
"""

DEFAULT_COMPONENTS: tuple[str, ...] = (
    "default",
    "env_default",
    "role_default",
    "force_default",
)
"""Default-family layers, in ascending precedence."""

OVERRIDE_COMPONENTS: tuple[str, ...] = (
    "override",
    "role_override",
    "env_override",
    "force_override",
)
"""Override-family layers, in ascending precedence."""

NORMAL_COMPONENT = "normal"
"""Operator-supplied values, between the default and override families."""

AUTOMATIC_COMPONENT = "automatic"
"""System-discovered facts. Highest precedence of all."""

COMPONENTS: tuple[str, ...] = (
    *DEFAULT_COMPONENTS,
    NORMAL_COMPONENT,
    *OVERRIDE_COMPONENTS,
    AUTOMATIC_COMPONENT,
)
"""All ten layers, lowest precedence first."""

PRECEDENCE: dict[str, int] = {name: index for index, name in enumerate(COMPONENTS)}
"""Layer name to precedence index (higher wins)."""

ENV_PREFIX = "STRATA_"
"""Prefix for environment variables read by strata.config."""
