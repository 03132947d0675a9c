"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with STRATA_ prefix
3. .env file named by STRATA_ENV_FILE (if present)
4. Field defaults (lowest)

Nested config uses double underscore delimiter:
  STRATA_LOOKUP__SCALAR_INDEX=error
  STRATA_ENCODING__INDENT=2
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import strata.config.types as types
import strata.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit STRATA_ENV_FILE is honored. A library must not pick
    up whatever .env happens to sit in the caller's working directory.
    """
    if env_file := _os.environ.get(f"{constants.ENV_PREFIX}ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Runtime settings for Strata.

    Only ambient behavior is configured here (diagnostics and encoding
    defaults). Merge semantics are fixed and cannot be configured.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # STRATA_LOOKUP__SCALAR_INDEX
        extra="allow",
    )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without a
        stray .env interfering.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    lookup: types.LookupConfig = _pydantic.Field(default_factory=types.LookupConfig)
    """Lookup settings (scalar indexing policy)."""

    encoding: types.EncodingConfig = _pydantic.Field(
        default_factory=types.EncodingConfig
    )
    """JSON encoding defaults."""


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use.

    STRATA_ENV_FILE is resolved here rather than at import, so setting it
    before a reset_settings() call takes effect.
    """
    global _settings
    if _settings is None:
        _settings = Settings(_env_file=_get_env_file())  # type: ignore[call-arg]
    return _settings


def use_settings(settings: Settings) -> None:
    """Install an explicit settings instance (e.g. built from a config file)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop the process-wide settings so the next call rereads the environment."""
    global _settings
    _settings = None
