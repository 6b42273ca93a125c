"""
=======================
Configuration Utilities
=======================

Functions for turning configuration files and dictionaries into the
:class:`~layered_config_tree.LayeredConfigTree` read by ``sortition``
managers.

Configuration is layered. Manager defaults form the ``base`` layer, the
optional ``~/sortition.yaml`` file forms the ``user_configs`` layer and
values supplied by the caller (a dictionary or a yaml file) form the
``override`` layer. A configuration file has a single top level key::

    configuration:
        randomness:
            random_seed: 12345

"""
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from layered_config_tree import ConfigurationError, LayeredConfigTree

from sortition.framework.randomness.manager import RandomnessManager
from sortition.manager import Manager

DEFAULT_CONFIGURATION_LAYERS = ["base", "user_configs", "override"]
USER_CONFIGURATION_PATH = Path("~/sortition.yaml")


def build_configuration(
    configuration: dict[str, Any] | str | Path | None = None,
    managers: Iterable[Manager] | None = None,
) -> LayeredConfigTree:
    """Builds the configuration tree for a set of managers.

    Parameters
    ----------
    configuration
        Overrides, either as a dictionary or as the path to a yaml
        configuration file.
    managers
        The managers whose defaults form the base layer. Defaults to a
        :class:`RandomnessManager`.

    Returns
    -------
        The layered configuration.
    """
    config = LayeredConfigTree(layers=DEFAULT_CONFIGURATION_LAYERS)
    for manager in managers if managers is not None else [RandomnessManager()]:
        config.update(manager.configuration_defaults, layer="base", source=manager.name)

    user_config_path = USER_CONFIGURATION_PATH.expanduser()
    if user_config_path.exists():
        config.update(
            load_configuration_file(user_config_path),
            layer="user_configs",
            source=str(user_config_path),
        )

    if isinstance(configuration, (str, Path)):
        config.update(
            load_configuration_file(configuration),
            layer="override",
            source=str(configuration),
        )
    elif configuration:
        config.update(configuration, layer="override", source="user_supplied_args")
    return config


def load_configuration_file(file_path: str | Path) -> dict[str, Any]:
    """Loads and validates a yaml configuration file.

    Raises
    ------
    ConfigurationError
        If the file does not exist, is not a yaml file or has top level keys
        other than ``configuration``.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigurationError(
            f"If you provide a configuration file, it must be a file. You provided {file_path}",
            value_name=None,
        )
    if file_path.suffix not in [".yaml", ".yml"]:
        raise ConfigurationError(
            f"Configuration files must be in a yaml format. You provided {file_path.suffix}",
            value_name=None,
        )

    with file_path.open() as f:
        raw_config = yaml.full_load(f) or {}
    extra_keys = set(raw_config) - {"configuration"}
    if extra_keys:
        raise ConfigurationError(
            f"Configuration file {file_path} contains additional top level keys {sorted(extra_keys)}.",
            value_name=None,
        )
    return raw_config.get("configuration") or {}
