"""esrotate Exceptions

This module contains all exception classes raised by the esrotate package.
Errors coming out of the Elasticsearch client are never swallowed: they are
re-raised as one of these classes, chained to the original.
"""

# pylint: disable=redefined-builtin


class EsrotateException(Exception):
    """
    Base class for all exceptions raised by esrotate which are not Elasticsearch
    exceptions.
    """


class ConfigurationError(EsrotateException):
    """
    Exception raised when a misconfiguration is detected
    """


class ConnectionError(EsrotateException):
    """
    Exception raised when the Elasticsearch client cannot be built from the
    provided connection configuration, or the cluster cannot be reached while
    validating the connection.
    """


class ClientError(EsrotateException):
    """
    Exception raised when a create-index or write round trip fails.

    The exception from the Elasticsearch client is kept in :py:attr:`original`
    and is also the ``__cause__`` of this exception.
    """

    def __init__(self, message, original=None):
        super().__init__(message)
        #: The exception raised by the Elasticsearch client, if any
        self.original = original
