"""
Option defaults for esrotate.

voluptuous schema fragments for every configuration and command option. Each
function returns a single-key dict, so fragments can be combined into schemas
in :py:mod:`esrotate.validators`.
"""

from voluptuous import All, Any, Coerce, Invalid, Length, Optional, Range, Required

from esrotate.exceptions import ConfigurationError
from esrotate.rotation import Rotation


def Boolean():
    """
    Validate boolean-like string values.
    Accepts 'true', 'false', '1', '0', 'yes', 'no' (case-insensitive).
    """
    def validator(value):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            if value.lower() in ('true', '1', 'yes'):
                return True
            if value.lower() in ('false', '0', 'no'):
                return False
        raise ValueError(f"Invalid boolean value: {value}")
    return validator


# Connection options

def url():
    """
    Full URL of the single Elasticsearch node, e.g. ``https://localhost:9200``
    """
    return {Required("url"): All(str, Length(min=1))}


def esecure():
    """
    Secondary secret sent in the ``esecure`` header of every request
    """
    return {Optional("esecure"): Any(None, str)}


def username():
    """Username for basic authentication"""
    return {Optional("username"): Any(None, str)}


def password():
    """Password for basic authentication"""
    return {Optional("password"): Any(None, str)}


def api_key():
    """API key for authentication"""
    return {Optional("api_key"): Any(None, str)}


def ca_certs():
    """Path to the CA certificate file"""
    return {Optional("ca_certs"): Any(None, str)}


def verify_certs():
    """Whether to verify TLS certificates"""
    return {Optional("verify_certs"): Boolean()}


def ssl_no_validate():
    """Inverse of ``verify_certs``"""
    return {Optional("ssl_no_validate"): Boolean()}


def request_timeout():
    """Request timeout in seconds"""
    return {Optional("request_timeout"): All(Coerce(int), Range(min=1, max=86400))}


def timeout():
    """Alias of ``request_timeout``"""
    return {Optional("timeout"): All(Coerce(int), Range(min=1, max=86400))}


# Command options

def base_name():
    """Index name prefix, the part before the dated suffix"""
    return {Required("base_name"): All(str, Length(min=1))}


def rotation():
    """
    How often a new index is started: day, month, year, hour, or minute
    """
    return {Optional("rotation", default=Rotation.DAY): _rotation}


def _rotation(value):
    try:
        return Rotation.from_string(value)
    except ConfigurationError as err:
        raise Invalid(str(err)) from err
