"""The esrotate client handle"""

import logging

from elasticsearch8 import Elasticsearch
from elasticsearch8.exceptions import ApiError, TransportError

from esrotate.constants import ESECURE_DEFAULT, ESECURE_HEADER
from esrotate.esclient import (
    create_es_client,
    single_node_from_dict,
    validate_connection,
)
from esrotate.exceptions import ClientError
from esrotate.rotation import Rotation, get_index_name


class ElasticClient:
    """
    Owns one Elasticsearch connection and the optional secondary secret.

    Every request goes out with the ``esecure`` header set to the configured
    secret, or to ``default`` when none was configured. The handle is never
    modified after construction; build a new one to reconfigure.

    :param config: The connection configuration
    :type config: :py:class:`~.esrotate.esclient.SingleNode`

    :raises: :py:exc:`~.esrotate.exceptions.ConnectionError` if the client
        cannot be built from ``config``

    :example:
        >>> from esrotate import ElasticClient, Rotation, SingleNode
        >>> client = ElasticClient(SingleNode("https://localhost:9200", esecure="s3cr3t"))
        >>> client.write_entity("logs", Rotation.DAY, {"message": "hello"})
    """

    def __init__(self, config):
        self.loggit = logging.getLogger("esrotate.client")
        #: The :py:class:`~.elasticsearch8.Elasticsearch` client
        self.elastic_client = create_es_client(config)
        #: The secondary secret, or ``None``
        self.esecure = config.esecure
        self.loggit.debug("ElasticClient initialized for %s", config.url)

    @classmethod
    def from_config(cls, client_config):
        """
        :param client_config: The ``elasticsearch`` section of a configuration
            dictionary, see :py:func:`~.esrotate.config.get_elasticsearch_config`
        :type client_config: dict

        :rtype: :py:class:`ElasticClient`
        """
        return cls(single_node_from_dict(client_config))

    @property
    def headers(self):
        """The headers attached to every request"""
        return {ESECURE_HEADER: self.esecure if self.esecure is not None else ESECURE_DEFAULT}

    def _request_client(self) -> Elasticsearch:
        """A view of :py:attr:`elastic_client` that sends :py:attr:`headers`."""
        return self.elastic_client.options(headers=self.headers)

    def get_index_name_with_pattern(self, index_name, rotation):
        """
        :param index_name: The index name prefix
        :param rotation: The rotation granularity

        :type index_name: str
        :type rotation: :py:class:`~.esrotate.rotation.Rotation`

        :returns: ``index_name`` dated with the current UTC time
        :rtype: str
        """
        return get_index_name(index_name, Rotation.from_string(rotation))

    def create_index_mapping(self, index_name, rotation, mapping):
        """
        Create the current index for ``index_name`` with ``mapping`` as the
        request body (``settings``, ``mappings``, ``aliases``).

        :param index_name: The index name prefix
        :param rotation: The rotation granularity
        :param mapping: The create index request body

        :type index_name: str
        :type rotation: :py:class:`~.esrotate.rotation.Rotation`
        :type mapping: dict

        :returns: The raw response from Elasticsearch
        :rtype: :py:class:`~.elastic_transport.ObjectApiResponse`

        :raises: :py:exc:`~.esrotate.exceptions.ClientError` for any failure
            reported by the Elasticsearch client, including the index already
            existing
        """
        name = self.get_index_name_with_pattern(index_name, rotation)
        self.loggit.info('Creating index "%s"', name)
        try:
            return self._request_client().indices.create(index=name, body=mapping)
        except (ApiError, TransportError) as err:
            self.loggit.error('Unable to create index "%s": %s', name, err)
            raise ClientError(f'Unable to create index "{name}". Error: {err}', original=err) from err

    def write_entity(self, index_name, rotation, entity):
        """
        Index ``entity`` as a new document in the current index for
        ``index_name``.

        :param index_name: The index name prefix
        :param rotation: The rotation granularity
        :param entity: The document

        :type index_name: str
        :type rotation: :py:class:`~.esrotate.rotation.Rotation`
        :type entity: dict

        :returns: The raw response from Elasticsearch
        :rtype: :py:class:`~.elastic_transport.ObjectApiResponse`

        :raises: :py:exc:`~.esrotate.exceptions.ClientError` for any failure
            reported by the Elasticsearch client
        """
        name = self.get_index_name_with_pattern(index_name, rotation)
        self.loggit.debug('Writing document to "%s"', name)
        try:
            return self._request_client().index(index=name, document=entity)
        except (ApiError, TransportError) as err:
            self.loggit.error('Unable to write document to "%s": %s', name, err)
            raise ClientError(f'Unable to write document to "{name}". Error: {err}', original=err) from err

    def validate(self):
        """
        Check the cluster can be reached.

        :returns: Cluster name, status, node count and version
        :rtype: dict
        """
        return validate_connection(self._request_client())

    def close(self):
        """Close the underlying transport"""
        self.elastic_client.close()
