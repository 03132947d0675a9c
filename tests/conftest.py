"""
Shared pytest fixtures for Strata tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import strata.config as config
import strata.constants as constants


def clean_env() -> dict[str, str]:
    """Return the environment with every STRATA_ variable removed."""
    return {k: v for k, v in _os.environ.items() if not k.startswith(constants.ENV_PREFIX)}


@_pytest.fixture(autouse=True)
def isolated_settings() -> _typing.Iterator[None]:
    """
    Run every test against default settings.

    Clears STRATA_* variables and drops the process-wide settings before
    and after the test, so no test sees another test's configuration.
    """
    with _mock.patch.dict(_os.environ, clean_env(), clear=True):
        config.reset_settings()
        yield
    config.reset_settings()


@_pytest.fixture
def use_settings() -> _typing.Callable[..., config.Settings]:
    """
    Install settings built from keyword arguments.

    Usage:
        def test_strict(use_settings):
            use_settings(lookup={"scalar_index": "error"})
    """

    def _install(**kwargs: _typing.Any) -> config.Settings:
        settings = config.Settings.construct_without_dotenv(**kwargs)
        config.use_settings(settings)
        return settings

    return _install
