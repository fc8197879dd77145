"""
esrotate - Elasticsearch client for time rotated indices

Creates indices and writes documents whose names carry a UTC date suffix
(``logs-20240305``), sending a secondary secret in the ``esecure`` header of
every request.
"""

__version__ = "1.0.0"

from esrotate.exceptions import (
    EsrotateException,
    ConfigurationError,
    ConnectionError,
    ClientError,
)
from esrotate.constants import (
    ESECURE_HEADER,
    ESECURE_DEFAULT,
)
from esrotate.rotation import (
    Rotation,
    get_time_index,
    get_index_name,
    get_index_datetime,
)
from esrotate.esclient import (
    SingleNode,
    create_es_client,
    validate_connection,
)
from esrotate.client import ElasticClient

__all__ = [
    "__version__",
    # Exceptions
    "EsrotateException",
    "ConfigurationError",
    "ConnectionError",
    "ClientError",
    # Constants
    "ESECURE_HEADER",
    "ESECURE_DEFAULT",
    # Rotation
    "Rotation",
    "get_time_index",
    "get_index_name",
    "get_index_datetime",
    # ES Client
    "SingleNode",
    "create_es_client",
    "validate_connection",
    "ElasticClient",
]
