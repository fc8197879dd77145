"""Index rotation: time-bucketed index names"""

import logging
import re
from datetime import datetime, timezone
from enum import Enum

from esrotate.exceptions import ConfigurationError


class Rotation(Enum):
    """
    How often a new index is started. Each member's value is the
    :py:func:`~.time.strftime` pattern used to build the index name suffix.
    All patterns render in UTC and produce digits only.
    """

    DAY = "%Y%m%d"
    MONTH = "%Y%m"
    YEAR = "%Y"
    HOUR = "%Y%m%d%H"
    MINUTE = "%Y%m%d%H%M"

    @property
    def pattern(self):
        """The :py:func:`~.time.strftime` pattern for this rotation"""
        return self.value

    @classmethod
    def from_string(cls, name):
        """
        :param name: A rotation name, case insensitive, e.g. ``day`` or ``Hour``
        :type name: str

        :returns: The matching :py:class:`Rotation` member
        :rtype: :py:class:`Rotation`
        """
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError as err:
            choices = [member.name.lower() for member in cls]
            raise ConfigurationError(
                f'Unknown rotation "{name}". Must be one of: {choices}'
            ) from err


def _as_utc(moment):
    """Naive datetimes are taken to already be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def get_time_index(now, rotation):
    """
    Render ``now`` with the pattern of ``rotation``.

    The rendered string is returned as is. It is not parsed into an integer, so
    a pattern that starts with a ``0`` would keep its leading zero.

    :param now: The point in time to render
    :param rotation: The rotation granularity

    :type now: :py:class:`~.datetime.datetime`
    :type rotation: :py:class:`Rotation`

    :returns: The digit-only index suffix
    :rtype: str
    """
    suffix = _as_utc(now).strftime(Rotation.from_string(rotation).pattern)
    if not suffix.isdigit():
        raise AssertionError(f"Rotation pattern rendered non-digits: {suffix}")
    return suffix


def get_index_name(base_name, rotation, now=None):
    """
    :param base_name: The index name prefix
    :param rotation: The rotation granularity
    :param now: The point in time to use. Defaults to the current UTC time.

    :type base_name: str
    :type rotation: :py:class:`Rotation`
    :type now: :py:class:`~.datetime.datetime`

    :returns: ``<base_name>-<suffix>``, e.g. ``logs-20240305`` for a daily rotation
    :rtype: str
    """
    logger = logging.getLogger(__name__)
    if now is None:
        now = datetime.now(timezone.utc)
    name = f"{base_name}-{get_time_index(now, rotation)}"
    logger.debug("Resolved index name: %s", name)
    return name


def get_index_datetime(index_name, rotation):
    """
    Reverse of :py:func:`get_index_name`: read the suffix of ``index_name``
    back into the start of its time bucket.

    :param index_name: A name produced by :py:func:`get_index_name`
    :param rotation: The rotation granularity the name was built with

    :type index_name: str
    :type rotation: :py:class:`Rotation`

    :returns: The UTC start of the bucket, e.g. ``2024-03-05T00:00:00+00:00``
        for ``logs-20240305`` and a daily rotation
    :rtype: :py:class:`~.datetime.datetime`
    """
    rotation = Rotation.from_string(rotation)
    width = len(datetime(2000, 1, 1).strftime(rotation.pattern))
    match = re.search(r"-(?P<date>\d{%d})$" % width, index_name)
    if not match:
        raise ConfigurationError(
            f'Index name "{index_name}" does not end with a '
            f"{rotation.name.lower()} suffix"
        )
    try:
        mydate = datetime.strptime(match.group("date"), rotation.pattern)
    except ValueError as err:
        raise ConfigurationError(
            f'Unable to parse the suffix of "{index_name}". Error: {err}'
        ) from err
    return mydate.replace(tzinfo=timezone.utc)
