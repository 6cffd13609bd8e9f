"""
Configuration loading for the Semantria client.

Configuration is a plain dict over DEFAULT_CONFIG. Sources, lowest priority
first: defaults, a JSON config file, SEMANTRIA_* environment variables, and
explicit overrides.
"""

import json
import os
from typing import Any, Dict, Mapping, Optional

from .constants import DEFAULT_CONFIG
from .exceptions import ConfigurationError
from .observer import RequestObserver
from .session import Session

ENV_PREFIX = "SEMANTRIA_"

ENV_KEYS = (
    'consumer_key',
    'consumer_secret',
    'app_key',
    'username',
    'password',
    'api_host',
    'session_file',
)


def _check_keys(config: Mapping[str, Any], source: str):
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys in {source}: {', '.join(unknown)}")


def read_config_file(path: str) -> Dict[str, Any]:
    """Read a JSON config file holding a single object."""
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            data = json.load(fh)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    _check_keys(data, path)
    return data


def read_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect SEMANTRIA_* variables that are set and non-empty."""
    environ = os.environ if environ is None else environ
    config = {}
    for key in ENV_KEYS:
        value = environ.get(ENV_PREFIX + key.upper())
        if value:
            config[key] = value
    return config


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides,
) -> Dict[str, Any]:
    """
    Merge configuration sources into one dict.

    Args:
        path: Optional JSON config file
        environ: Environment mapping (defaults to os.environ)
        **overrides: Explicit values; None values are ignored

    Returns:
        Complete configuration dict

    Raises:
        ConfigurationError: On unreadable files or unknown keys
    """
    _check_keys(overrides, "overrides")

    config = dict(DEFAULT_CONFIG)
    if path:
        config.update(read_config_file(path))
    config.update(read_environment(environ))
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def session_from_config(
    config: Mapping[str, Any],
    observer: Optional[RequestObserver] = None,
) -> Session:
    """
    Validate a configuration dict and build a Session from it.

    Raises:
        ConfigurationError: If a value is invalid
    """
    _check_keys(config, "configuration")
    merged = {**DEFAULT_CONFIG, **config}

    api_host = merged['api_host'] or ""
    if not api_host.startswith(("http://", "https://")):
        raise ConfigurationError("api_host must start with http:// or https://")

    if not merged['format']:
        raise ConfigurationError("format cannot be empty")

    try:
        timeout = float(merged['timeout'])
    except (TypeError, ValueError) as e:
        raise ConfigurationError("timeout must be a number") from e
    if timeout <= 0:
        raise ConfigurationError("timeout must be positive")

    if not merged['session_file']:
        raise ConfigurationError("session_file cannot be empty")

    return Session(
        consumer_key=merged['consumer_key'],
        consumer_secret=merged['consumer_secret'],
        api_host=api_host.rstrip('/'),
        api_version=merged['api_version'],
        sdk_version=merged['sdk_version'],
        application_name=merged['application_name'],
        format=merged['format'],
        observer=observer or RequestObserver(),
        app_key=merged['app_key'],
        username=merged['username'],
        password=merged['password'],
        session_file=merged['session_file'],
        timeout=timeout,
    )
