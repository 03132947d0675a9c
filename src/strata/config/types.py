"""Configuration type definitions for Strata settings.

This module defines the Pydantic models for the config sections nested
within the main Settings class:
- LookupConfig: how indexing a scalar cell is reported
- EncodingConfig: default options for JSON encoding

Design decision: All types use `extra="allow"` to preserve unknown fields.
Use `get_extra_fields()` to audit a config for typos.
"""

import typing as _typing

import pydantic as _pydantic

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than silently dropped, so a
    misspelled key can be reported instead of ignored.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name -> value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def has_extra_fields(self) -> bool:
        """Check if this config has any unrecognized fields."""
        return bool(self.model_extra)

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"lookup.scalar_idnex": "error"}

        Args:
            prefix: Dotted path prefix (used in recursion).

        Returns:
            Flat dict of path -> value for all unrecognized fields.
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Lookup Settings
# =============================================================================

ScalarIndexPolicy: _typing.TypeAlias = _typing.Literal["ignore", "warn", "error"]


class LookupConfig(ConfigBase):
    """
    Lookup behavior.

    Env section: STRATA_LOOKUP__*
    """

    scalar_index: ScalarIndexPolicy = "warn"
    """What to do when a scalar cell is indexed.

    - ignore: return the resolved scalar silently
    - warn: return the resolved scalar and log a warning
    - error: raise ScalarIndexError
    """


# =============================================================================
# Encoding Settings
# =============================================================================


class EncodingConfig(ConfigBase):
    """
    Defaults for AttributeCell.to_json().

    Env section: STRATA_ENCODING__*
    """

    indent: int | None = _pydantic.Field(default=None, ge=0)
    """Indentation for pretty-printed JSON (None = compact)."""

    sort_keys: bool = False
    """Sort object keys in the output."""

    ensure_ascii: bool = True
    """Escape non-ASCII characters."""

    def json_kwargs(self) -> dict[str, _typing.Any]:
        """Return these options as keyword arguments for json.dumps."""
        return {
            "indent": self.indent,
            "sort_keys": self.sort_keys,
            "ensure_ascii": self.ensure_ascii,
        }
