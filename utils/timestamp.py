"""UTC timestamps with microsecond precision."""

import time
from datetime import datetime, timezone

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def now_micros():
    """Microseconds since the Unix epoch."""
    return time.time_ns() // 1_000


def format_timestamp(epoch_us=None):
    """ISO 8601 in UTC, e.g. ``2024-01-02T03:04:05.000006Z``."""
    if epoch_us is None:
        epoch_us = now_micros()
    seconds, micros = divmod(epoch_us, 1_000_000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=micros)
    return moment.strftime(_ISO_FORMAT)
