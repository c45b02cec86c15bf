"""Configuration loading and logging setup shared by both entry points."""
import json
import logging
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = 'catalog_config.json'

DEFAULTS: Dict[str, Any] = {
    'host': '127.0.0.1',
    'port': 5000,
    'log_level': 'INFO',
    'data_file': None,
    'api_url': 'http://localhost:5000',
    'timeout': 10.0,
}

# environment variable -> config key
ENV_OVERRIDES = {
    'PORT': 'port',
    'CATALOG_HOST': 'host',
    'CATALOG_LOG_LEVEL': 'log_level',
    'CATALOG_DATA_FILE': 'data_file',
    'CATALOG_API_URL': 'api_url',
    'CATALOG_TIMEOUT': 'timeout',
}


class ConfigError(Exception):
    """Raised when the config file or an override cannot be used."""


def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root ``catalog`` logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Unknown names fall back to WARNING.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('catalog')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from an optional JSON file with environment overrides.

    Precedence, lowest to highest: built-in defaults, the JSON file (only read
    when it exists), then the variables in :data:`ENV_OVERRIDES`.

    Raises:
        ConfigError: If the file is not valid JSON, is not an object, or
            ``port``/``timeout`` cannot be converted to numbers.
    """
    config = dict(DEFAULTS)
    path = config_path or DEFAULT_CONFIG_PATH

    if os.path.exists(path):
        try:
            with open(path, 'r') as fh:
                file_config = json.load(fh)
        except (json.JSONDecodeError, IOError) as exc:
            raise ConfigError(f"Error parsing config file '{path}': {exc}") from exc
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file '{path}' must contain a JSON object")
        config.update(file_config)
    elif config_path:
        raise ConfigError(f"Config file '{config_path}' not found")

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            config[key] = value

    try:
        config['port'] = int(config['port'])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid port: {config['port']!r}") from exc
    try:
        config['timeout'] = float(config['timeout'])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout: {config['timeout']!r}") from exc

    return config
