"""
Schema validation for esrotate.

This module combines the voluptuous fragments from :py:mod:`esrotate.defaults`
into schemas for the client configuration and for each command.
"""

from voluptuous import Schema

from esrotate import defaults


CLIENT_OPTIONS = [
    defaults.url(),
    defaults.esecure(),
    defaults.username(),
    defaults.password(),
    defaults.api_key(),
    defaults.ca_certs(),
    defaults.verify_certs(),
    defaults.ssl_no_validate(),
    defaults.request_timeout(),
    defaults.timeout(),
]

# Each command lists the option defaults that apply to it
COMMAND_OPTIONS = {
    'index_name': [
        defaults.base_name(),
        defaults.rotation(),
    ],
    'create_index': [
        defaults.base_name(),
        defaults.rotation(),
    ],
    'write': [
        defaults.base_name(),
        defaults.rotation(),
    ],
}


def _build_schema(option_list: list) -> Schema:
    """
    Build a voluptuous Schema from a list of option definitions.

    Each option definition is a dict with a single key (the option name)
    and a validation rule as the value.
    """
    schema_dict = {}
    for option_def in option_list:
        schema_dict.update(option_def)
    return Schema(schema_dict)


CLIENT_SCHEMA = _build_schema(CLIENT_OPTIONS)

COMMAND_SCHEMAS = {
    command: _build_schema(options) for command, options in COMMAND_OPTIONS.items()
}


def validate_client_config(client_config: dict) -> dict:
    """
    Validate the ``elasticsearch`` section of a configuration.

    Returns:
        dict: Validated configuration with defaults applied

    Raises:
        voluptuous.MultipleInvalid: If validation fails
    """
    return CLIENT_SCHEMA(client_config)


def validate_options(command: str, options: dict) -> dict:
    """
    Validate options for a given command.

    Args:
        command: The name of the command (index_name, create_index, write)
        options: Dictionary of option values to validate

    Returns:
        dict: Validated and normalized options with defaults applied

    Raises:
        voluptuous.MultipleInvalid: If validation fails
        KeyError: If the command is not recognized
    """
    if command not in COMMAND_SCHEMAS:
        raise KeyError(f"Unknown command: {command}. Valid commands are: {list(COMMAND_SCHEMAS.keys())}")
    return COMMAND_SCHEMAS[command](options)
