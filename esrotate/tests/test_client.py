"""
Tests for the ElasticClient handle

These tests verify that:
1. The handle is built from a connection configuration, or refuses to be
2. Every request carries the esecure header
3. Index names are resolved per rotation before each request
4. Failures surface as ClientError after exactly one attempt
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import elastic_transport
import pytest
from elasticsearch8.exceptions import BadRequestError
from elasticsearch8.exceptions import ConnectionError as ESConnectionError

from esrotate.client import ElasticClient
from esrotate.esclient import SingleNode
from esrotate.exceptions import ClientError, ConnectionError
from esrotate.rotation import Rotation

MOMENT = datetime(2024, 3, 5, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_es_class():
    """Patch the Elasticsearch class used to build clients."""
    with patch("esrotate.esclient.Elasticsearch") as mock_class:
        mock_class.return_value = MagicMock()
        yield mock_class


@pytest.fixture
def frozen_now():
    """Pin the current time used for index names."""
    with patch("esrotate.rotation.datetime") as mock_datetime:
        mock_datetime.now.return_value = MOMENT
        yield mock_datetime


def already_exists_error():
    """A 400 error as raised when the index already exists."""
    meta = MagicMock()
    meta.status = 400
    return BadRequestError(
        message="resource_already_exists_exception",
        meta=meta,
        body={"error": {"type": "resource_already_exists_exception"}, "status": 400},
    )


class TestConstruction:
    """Tests for building an ElasticClient"""

    def test_invalid_url(self):
        """A malformed URL raises ConnectionError and gives no handle"""
        client = None
        with pytest.raises(ConnectionError):
            client = ElasticClient(SingleNode("not a url"))
        assert client is None

    def test_esecure_kept(self, mock_es_class):
        """The secret from the configuration is kept on the handle"""
        client = ElasticClient(SingleNode("http://localhost:9200", esecure="s3cr3t"))

        assert client.esecure == "s3cr3t"
        assert client.elastic_client is mock_es_class.return_value

    def test_from_config(self, mock_es_class):
        """A configuration dictionary can be used instead of SingleNode"""
        client = ElasticClient.from_config({"url": "https://localhost:9200", "esecure": "s3cr3t"})

        assert client.esecure == "s3cr3t"
        assert mock_es_class.call_args[1]["hosts"] == ["https://localhost:9200"]

    def test_real_client_builds_without_io(self):
        """A well formed URL builds a real client without contacting it"""
        client = ElasticClient(SingleNode("http://127.0.0.1:9"))

        assert client.esecure is None
        client.close()


class TestHeaders:
    """Tests for the esecure header"""

    def test_default_header(self, mock_es_class):
        """Without a secret the header is the literal 'default'"""
        client = ElasticClient(SingleNode("http://localhost:9200"))

        assert client.headers == {"esecure": "default"}

    def test_secret_header(self, mock_es_class):
        """With a secret the header is exactly the secret"""
        client = ElasticClient(SingleNode("http://localhost:9200", esecure=" s3cr3t "))

        assert client.headers == {"esecure": " s3cr3t "}

    def test_empty_secret_is_sent(self, mock_es_class):
        """An empty secret is still a configured secret"""
        client = ElasticClient(SingleNode("http://localhost:9200", esecure=""))

        assert client.headers == {"esecure": ""}

    @pytest.mark.parametrize("esecure,expected", [(None, "default"), ("s3cr3t", "s3cr3t")])
    def test_header_on_every_request(self, mock_es_class, esecure, expected):
        """create_index_mapping, write_entity and validate all send the header"""
        es = mock_es_class.return_value
        es.options.return_value.cluster.health.return_value = {}
        es.options.return_value.info.return_value = {}
        client = ElasticClient(SingleNode("http://localhost:9200", esecure=esecure))

        client.create_index_mapping("idx", Rotation.DAY, {})
        client.write_entity("idx", Rotation.DAY, {})
        client.validate()

        assert es.options.call_count == 3
        for call in es.options.call_args_list:
            assert call[1] == {"headers": {"esecure": expected}}


class TestCreateIndexMapping:
    """Tests for create_index_mapping"""

    def test_creates_dated_index(self, mock_es_class, frozen_now):
        """The dated name and the mapping body are sent"""
        es = mock_es_class.return_value
        response = MagicMock()
        es.options.return_value.indices.create.return_value = response
        mapping = {"mappings": {"properties": {"message": {"type": "text"}}}}
        client = ElasticClient(SingleNode("http://localhost:9200"))

        result = client.create_index_mapping("logs", Rotation.DAY, mapping)

        assert result is response
        es.options.return_value.indices.create.assert_called_once_with(
            index="logs-20240305", body=mapping
        )

    def test_already_exists(self, mock_es_class, frozen_now):
        """An existing index is reported, not ignored"""
        es = mock_es_class.return_value
        error = already_exists_error()
        es.options.return_value.indices.create.side_effect = error
        client = ElasticClient(SingleNode("http://localhost:9200"))

        with pytest.raises(ClientError) as exc_info:
            client.create_index_mapping("logs", Rotation.MONTH, {})

        assert exc_info.value.original is error
        assert exc_info.value.__cause__ is error
        assert "logs-202403" in str(exc_info.value)

    def test_unreachable_no_retry(self, mock_es_class):
        """A connection failure raises ClientError after one attempt"""
        es = mock_es_class.return_value
        es.options.return_value.indices.create.side_effect = ESConnectionError("Connection refused")
        client = ElasticClient(SingleNode("http://localhost:9200"))

        with pytest.raises(ClientError):
            client.create_index_mapping("logs", Rotation.DAY, {})

        assert es.options.return_value.indices.create.call_count == 1


class TestWriteEntity:
    """Tests for write_entity"""

    @pytest.mark.parametrize(
        "rotation,expected",
        [
            (Rotation.DAY, "events-20240305"),
            (Rotation.MONTH, "events-202403"),
            (Rotation.YEAR, "events-2024"),
            (Rotation.HOUR, "events-2024030510"),
            (Rotation.MINUTE, "events-202403051000"),
        ],
    )
    def test_writes_to_dated_index(self, mock_es_class, frozen_now, rotation, expected):
        """The document is indexed into the dated index"""
        es = mock_es_class.return_value
        document = {"message": "hello", "level": "info"}
        client = ElasticClient(SingleNode("http://localhost:9200", esecure="s3cr3t"))

        client.write_entity("events", rotation, document)

        es.options.return_value.index.assert_called_once_with(index=expected, document=document)

    def test_returns_response(self, mock_es_class):
        """The raw response is returned unchanged"""
        es = mock_es_class.return_value
        response = MagicMock()
        es.options.return_value.index.return_value = response
        client = ElasticClient(SingleNode("http://localhost:9200"))

        assert client.write_entity("events", Rotation.DAY, {}) is response

    def test_unreachable_no_retry(self, mock_es_class):
        """A connection failure raises ClientError after one attempt"""
        es = mock_es_class.return_value
        error = ESConnectionError("Connection refused")
        es.options.return_value.index.side_effect = error
        client = ElasticClient(SingleNode("http://localhost:9200"))

        with pytest.raises(ClientError) as exc_info:
            client.write_entity("events", Rotation.DAY, {"a": 1})

        assert exc_info.value.original is error
        assert es.options.return_value.index.call_count == 1

    def test_other_errors_propagate(self, mock_es_class):
        """Errors that do not come from the client library are not wrapped"""
        es = mock_es_class.return_value
        es.options.return_value.index.side_effect = KeyError("boom")
        client = ElasticClient(SingleNode("http://localhost:9200"))

        with pytest.raises(KeyError):
            client.write_entity("events", Rotation.DAY, {})


class TestTransportRoundTrips:
    """Use a real client with the HTTP node stubbed out"""

    @patch.object(elastic_transport.Urllib3HttpNode, "perform_request")
    def test_unreachable_single_attempt(self, mock_perform):
        """An unreachable node is tried exactly once"""
        mock_perform.side_effect = elastic_transport.ConnectionError("Connection refused")
        client = ElasticClient(SingleNode("http://127.0.0.1:9"))

        with pytest.raises(ClientError):
            client.write_entity("events", Rotation.DAY, {"a": 1})

        assert mock_perform.call_count == 1
        client.close()


class TestValidate:
    """Tests for ElasticClient.validate"""

    def test_validate(self, mock_es_class):
        """Cluster details come back from validate"""
        es = mock_es_class.return_value
        es.options.return_value.cluster.health.return_value = {
            "cluster_name": "test-cluster",
            "status": "yellow",
            "number_of_nodes": 1,
        }
        es.options.return_value.info.return_value = {"version": {"number": "8.15.0"}}
        client = ElasticClient(SingleNode("http://localhost:9200"))

        result = client.validate()

        assert result["cluster_name"] == "test-cluster"
        assert result["version"] == "8.15.0"

    def test_close(self, mock_es_class):
        """close closes the underlying client"""
        client = ElasticClient(SingleNode("http://localhost:9200"))

        client.close()

        mock_es_class.return_value.close.assert_called_once()
