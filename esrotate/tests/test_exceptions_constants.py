"""Tests for esrotate exceptions and constants"""

import builtins

from esrotate.constants import ENV_PREFIX, ESECURE_DEFAULT, ESECURE_HEADER, LOG_FORMATS
from esrotate.exceptions import (
    ClientError,
    ConfigurationError,
    ConnectionError,
    EsrotateException,
)


def test_exception_hierarchy():
    """All package exceptions derive from EsrotateException"""
    assert issubclass(EsrotateException, Exception)
    assert issubclass(ConfigurationError, EsrotateException)
    assert issubclass(ConnectionError, EsrotateException)
    assert issubclass(ClientError, EsrotateException)


def test_connection_error_is_not_builtin():
    """The package ConnectionError is distinct from the builtin one"""
    assert ConnectionError is not builtins.ConnectionError
    assert not issubclass(ConnectionError, builtins.ConnectionError)


def test_client_error_original():
    """ClientError keeps the original exception"""
    original = ValueError("boom")
    err = ClientError("Unable to write", original=original)

    assert str(err) == "Unable to write"
    assert err.original is original


def test_client_error_without_original():
    """The original exception is optional"""
    assert ClientError("Unable to write").original is None


def test_header_constants():
    """The header name and default value are fixed"""
    assert ESECURE_HEADER == "esecure"
    assert ESECURE_DEFAULT == "default"


def test_env_prefix():
    """Environment variables use the ESROTATE_ prefix"""
    assert ENV_PREFIX == "ESROTATE_"


def test_log_formats():
    """The named log formats exist"""
    assert set(LOG_FORMATS) == {"default", "json", "logstash"}
