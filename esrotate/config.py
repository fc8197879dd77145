"""
Configuration management for esrotate.

This module handles loading and validating configuration from YAML files
and environment variables. The ``elasticsearch`` section takes a single
node ``url`` rather than a list of hosts.
"""

import logging
import os
from typing import Any, Optional

import yaml
from voluptuous import MultipleInvalid

from esrotate.constants import ENV_PREFIX, LOG_FORMATS
from esrotate.exceptions import ConfigurationError
from esrotate.validators import validate_client_config

# Mapping of environment variables to config paths
# Format: ENV_VAR_NAME -> (config_section, config_key)
ENV_MAPPING = {
    # Elasticsearch connection
    f"{ENV_PREFIX}ES_URL": ("elasticsearch", "url"),
    f"{ENV_PREFIX}ES_ESECURE": ("elasticsearch", "esecure"),
    f"{ENV_PREFIX}ES_USERNAME": ("elasticsearch", "username"),
    f"{ENV_PREFIX}ES_PASSWORD": ("elasticsearch", "password"),
    f"{ENV_PREFIX}ES_API_KEY": ("elasticsearch", "api_key"),
    f"{ENV_PREFIX}ES_CA_CERTS": ("elasticsearch", "ca_certs"),
    f"{ENV_PREFIX}ES_VERIFY_CERTS": ("elasticsearch", "verify_certs"),
    f"{ENV_PREFIX}ES_TIMEOUT": ("elasticsearch", "request_timeout"),
    # Logging
    f"{ENV_PREFIX}LOG_LEVEL": ("logging", "loglevel"),
    f"{ENV_PREFIX}LOG_FILE": ("logging", "logfile"),
    f"{ENV_PREFIX}LOG_FORMAT": ("logging", "logformat"),
}


def _deep_set(config: dict, path: tuple, value) -> None:
    """
    Set a value in a nested dictionary using a path tuple.

    Args:
        config: The dictionary to modify
        path: Tuple of keys representing the path (e.g., ("elasticsearch", "url"))
        value: The value to set
    """
    current = config
    for key in path[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[path[-1]] = value


def _override_path(config: dict, path: tuple) -> tuple:
    """
    Point elasticsearch overrides at the nested ``client`` section when the
    configuration uses one, so they land where they are read back.
    """
    es_config = config.get("elasticsearch")
    if path[0] == "elasticsearch" and isinstance(es_config, dict) and isinstance(es_config.get("client"), dict):
        return ("elasticsearch", "client") + path[1:]
    return path


def _parse_env_value(value: str, key: str) -> Any:
    """
    Parse an environment variable value, converting types as needed.

    Args:
        value: The string value from the environment
        key: The config key name (used to determine type)

    Returns:
        The parsed value with appropriate type
    """
    if key == "verify_certs":
        return value.lower() in ("true", "1", "yes")

    if key == "request_timeout":
        try:
            return int(value)
        except ValueError:
            return value

    return value


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from a YAML file and environment variables.

    Environment variables take precedence over file configuration.

    ```yaml
    elasticsearch:
      url: https://localhost:9200
      esecure: my-secondary-secret
      username: elastic
      password: changeme
      # Or for API key:
      # api_key: "base64-encoded-api-key"
      ca_certs: /path/to/ca.crt
      request_timeout: 30

    logging:
      loglevel: INFO
      logfile: /path/to/log
      logformat: default
    ```

    Args:
        config_path: Optional path to YAML configuration file.
                     If not provided, only environment variables are used.

    Returns:
        dict: Merged configuration dictionary

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    loggit = logging.getLogger("esrotate.config")
    config = {}

    if config_path:
        loggit.debug("Loading configuration from: %s", config_path)
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {config_path}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}") from e

        if not file_config:
            loggit.warning("Configuration file is empty: %s", config_path)
        elif not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {config_path}"
            )
        else:
            config = file_config

    for env_var, config_path_tuple in ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is not None:
            loggit.debug("Applying environment override: %s", env_var)
            parsed_value = _parse_env_value(value, config_path_tuple[-1])
            _deep_set(config, _override_path(config, config_path_tuple), parsed_value)

    return config


def get_elasticsearch_config(config: dict) -> dict:
    """
    Extract Elasticsearch client configuration from the full config.

    Both a nested `elasticsearch.client` and a flat `elasticsearch`
    section are accepted.

    Args:
        config: Full configuration dictionary

    Returns:
        dict: Elasticsearch client configuration

    Raises:
        ConfigurationError: If no Elasticsearch configuration is found
    """
    es_config = config.get("elasticsearch") or {}

    if "client" in es_config:
        client_config = es_config["client"]
    else:
        client_config = es_config

    if not client_config:
        raise ConfigurationError(
            "No Elasticsearch configuration found. "
            "Configuration must include 'elasticsearch' section with connection details."
        )

    return client_config


def get_logging_config(config: dict) -> dict:
    """
    Extract logging configuration from the full config, with defaults applied.
    """
    logging_config = dict(config.get("logging") or {})
    logging_config.setdefault("loglevel", "INFO")
    logging_config.setdefault("logformat", "default")
    return logging_config


def configure_logging(config: dict) -> None:
    """
    Configure the ``esrotate`` logger from the ``logging`` section of the config.

    ``logformat`` is one of ``default``, ``json``, ``logstash``, or a custom
    :py:mod:`logging` format string.
    """
    log_config = get_logging_config(config)

    loglevel = str(log_config["loglevel"]).upper()
    logfile = log_config.get("logfile")
    logformat = log_config["logformat"]

    level = getattr(logging, loglevel, logging.INFO)
    format_str = LOG_FORMATS.get(logformat, logformat)

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(format_str))
    handlers.append(console_handler)

    if logfile:
        file_handler = logging.FileHandler(logfile)
        file_handler.setFormatter(logging.Formatter(format_str))
        handlers.append(file_handler)

    logger = logging.getLogger("esrotate")
    logger.setLevel(level)
    logger.handlers = handlers

    # The client libraries are chatty at INFO
    for noisy in ("elastic_transport", "elasticsearch", "urllib3"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


def validate_config(config: dict) -> dict:
    """
    Validate the Elasticsearch section of the configuration.

    Args:
        config: Configuration dictionary to validate

    Returns:
        dict: The validated Elasticsearch client configuration

    Raises:
        ConfigurationError: If required configuration is missing or mistyped
    """
    es_config = get_elasticsearch_config(config)
    try:
        return validate_client_config(es_config)
    except MultipleInvalid as e:
        raise ConfigurationError(f"Invalid Elasticsearch configuration: {e}") from e
