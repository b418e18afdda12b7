#!/usr/bin/env python3
"""
Configuration loading for the recipe site.
Defaults, JSON or YAML config files, and environment overrides.
"""

import os
import json
import copy
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    'data_path': 'data/recipes.json',
    'recommendations_source': 'data/recommendations.md',
    'instruction_mode': 'placeholder',
    'fetch_timeout': 10.0,
    'max_retries': 3,
    'retry_base_delay': 0.5,
    'secret_key': 'change-me',
    'site_title': 'Recipes',
    'site_description': 'A minimal recipe collection',
}

# Environment variable -> (config key, type)
ENV_OVERRIDES = {
    'RECIPE_DATA_PATH': ('data_path', str),
    'RECOMMENDATIONS_SOURCE': ('recommendations_source', str),
    'INSTRUCTION_MODE': ('instruction_mode', str),
    'FETCH_TIMEOUT': ('fetch_timeout', float),
    'MAX_RETRIES': ('max_retries', int),
    'RETRY_BASE_DELAY': ('retry_base_delay', float),
    'SECRET_KEY': ('secret_key', str),
}


def read_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file, chosen by extension."""
    config_path = Path(config_path)
    with open(config_path, 'r', encoding='utf-8') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_path}")
    return data


def load_config(config_path: Optional[Union[str, Path]] = None,
                environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        config_path: Optional JSON/YAML file merged over the defaults
        environ: Environment mapping, defaults to os.environ

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path:
        config.update(read_config_file(config_path))

    environ = os.environ if environ is None else environ
    for variable, (key, cast) in ENV_OVERRIDES.items():
        if variable in environ:
            config[key] = cast(environ[variable])

    return config
