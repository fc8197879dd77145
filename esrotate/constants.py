"""Constants for the esrotate package"""

#: Name of the HTTP header carrying the secondary secret
ESECURE_HEADER = "esecure"

#: Header value sent when no secondary secret is configured
ESECURE_DEFAULT = "default"

#: Prefix of every environment variable read by :py:mod:`esrotate.config`
ENV_PREFIX = "ESROTATE_"

#: Accepted URL schemes for a single node connection
URL_SCHEMES = ("http", "https")

#: Named log formats understood by :py:func:`esrotate.config.configure_logging`
LOG_FORMATS = {
    "default": "%(asctime)s %(levelname)s %(name)s - %(message)s",
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
    "logstash": '{"@timestamp": "%(asctime)s", "level": "%(levelname)s", "logger_name": "%(name)s", "message": "%(message)s"}',
}

#: Configuration keys whose values must never be logged
SECRET_KEYS = ("password", "api_key", "esecure")
