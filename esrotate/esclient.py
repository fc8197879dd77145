"""
Elasticsearch connection handling for esrotate.

A connection is described by a configuration variant (only
:py:class:`SingleNode` exists today) and turned into an
:py:class:`~.elasticsearch8.Elasticsearch` client by :py:func:`create_es_client`.
Building the client does no network I/O; :py:func:`validate_connection` does.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import urlparse

from elasticsearch8 import Elasticsearch

from esrotate.constants import SECRET_KEYS, URL_SCHEMES
from esrotate.exceptions import ConnectionError


@dataclass(frozen=True)
class SingleNode:
    """
    Connect to one Elasticsearch node.

    :param url: Full node URL, e.g. ``https://localhost:9200``
    :param esecure: Secondary secret sent in the ``esecure`` header. When
        ``None``, the literal ``default`` is sent instead.
    :param username: Username for basic authentication
    :param password: Password for basic authentication
    :param api_key: API key for authentication
    :param ca_certs: Path to CA certificate file for TLS verification
    :param verify_certs: Whether to verify TLS certificates
    :param request_timeout: Request timeout in seconds
    """

    url: str
    esecure: Optional[str] = field(default=None, repr=False)
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    api_key: Optional[str] = field(default=None, repr=False)
    ca_certs: Optional[str] = None
    verify_certs: bool = True
    request_timeout: int = 30


#: Every supported connection configuration variant
ConnectionConfig = Union[SingleNode]


def check_url(url: str) -> None:
    """
    Reject URLs the client could not possibly connect to.

    Raises:
        ConnectionError: If ``url`` lacks an http(s) scheme or a host
    """
    if not isinstance(url, str) or not url:
        raise ConnectionError(f"Elasticsearch URL must be a non-empty string, got: {url!r}")
    try:
        parsed = urlparse(url)
        # Accessing .port validates it
        _ = parsed.port
    except ValueError as e:
        raise ConnectionError(f"Malformed Elasticsearch URL {url!r}: {e}") from e
    if parsed.scheme not in URL_SCHEMES:
        raise ConnectionError(
            f"Elasticsearch URL {url!r} must use one of the schemes: {list(URL_SCHEMES)}"
        )
    if not parsed.hostname:
        raise ConnectionError(f"Elasticsearch URL {url!r} has no host")


def create_es_client(config: ConnectionConfig) -> Elasticsearch:
    """
    Create an Elasticsearch client for a connection configuration.

    The client never retries a request on its own, so every call made through it
    is exactly one round trip.

    Args:
        config: The connection configuration

    Returns:
        Elasticsearch: Configured Elasticsearch client

    Raises:
        ConnectionError: If the URL is malformed or the client cannot be built
    """
    loggit = logging.getLogger("esrotate.esclient")

    if not isinstance(config, SingleNode):
        raise ConnectionError(f"Unsupported connection configuration: {type(config).__name__}")

    check_url(config.url)
    loggit.debug("Using single node connection: %s", config.url)

    client_kwargs = {
        "hosts": [config.url],
        "request_timeout": config.request_timeout,
        "verify_certs": config.verify_certs,
        "max_retries": 0,
        "retry_on_timeout": False,
    }

    if config.api_key:
        loggit.debug("Using API key authentication")
        client_kwargs["api_key"] = config.api_key
    elif config.username and config.password:
        loggit.debug("Using basic authentication with username: %s", config.username)
        client_kwargs["basic_auth"] = (config.username, config.password)

    if config.ca_certs:
        loggit.debug("Using CA certificate: %s", config.ca_certs)
        client_kwargs["ca_certs"] = config.ca_certs

    try:
        loggit.info("Creating Elasticsearch client for %s", config.url)
        return Elasticsearch(**client_kwargs)
    except (ValueError, TypeError) as e:
        loggit.error("Failed to create Elasticsearch client: %s", e)
        raise ConnectionError(f"Failed to create Elasticsearch client: {e}") from e


def single_node_from_dict(client_config: dict) -> SingleNode:
    """
    Build a :py:class:`SingleNode` from the ``elasticsearch`` section of a
    configuration dictionary. Unknown keys are ignored.

    Args:
        client_config: Dictionary with at least a ``url`` key

    Returns:
        SingleNode: The connection configuration
    """
    loggit = logging.getLogger("esrotate.esclient")
    params = {}
    for key in ["url", "esecure", "username", "password", "api_key",
                "ca_certs", "verify_certs", "request_timeout"]:
        if key in client_config:
            params[key] = client_config[key]

    # Handle alternative names
    if "timeout" in client_config and "request_timeout" not in params:
        params["request_timeout"] = client_config["timeout"]
    if "ssl_no_validate" in client_config and "verify_certs" not in params:
        params["verify_certs"] = not client_config["ssl_no_validate"]

    if "url" not in params:
        raise ConnectionError("Elasticsearch configuration must include 'url'")

    loggit.debug("Client parameters extracted from config: %s",
                 {k: v for k, v in params.items() if k not in SECRET_KEYS})
    return SingleNode(**params)


def validate_connection(client: Elasticsearch) -> dict:
    """
    Validate an Elasticsearch connection and return cluster information.

    Args:
        client: Elasticsearch client to validate

    Returns:
        dict: ``cluster_name``, ``status``, ``number_of_nodes`` and ``version``

    Raises:
        ConnectionError: If the cluster is unreachable or rejects the request
    """
    loggit = logging.getLogger("esrotate.esclient")

    try:
        health = client.cluster.health(timeout="10s")
        info = client.info()
    except Exception as e:
        loggit.error("Connection validation failed: %s", e)
        raise ConnectionError(f"Elasticsearch connection validation failed: {e}") from e

    result = {
        "cluster_name": health.get("cluster_name"),
        "status": health.get("status"),
        "number_of_nodes": health.get("number_of_nodes"),
        "version": info.get("version", {}).get("number"),
    }

    loggit.info(
        "Connection validated - Cluster: %s, Status: %s, Version: %s",
        result["cluster_name"],
        result["status"],
        result["version"],
    )

    return result
