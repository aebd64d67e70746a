"""Small runtime helpers: identifiers, timestamps and process id."""

from __future__ import annotations

import os
import time
import uuid

__all__ = ["new_uuid", "current_utc_time", "time_since_epoch_millisec", "get_pid"]

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def new_uuid() -> str:
    """Return a new random UUID in its canonical string form."""
    return str(uuid.uuid4())


def current_utc_time() -> str:
    """Return the current time as an ISO-8601 style timestamp ending in Z.

    The clock reading is taken from the local time of the machine.
    """
    return time.strftime(_TIMESTAMP_FORMAT, time.localtime())


def time_since_epoch_millisec() -> int:
    """Return the milliseconds elapsed since 1970-01-01 00:00:00 UTC."""
    return time.time_ns() // 1_000_000


def get_pid() -> int:
    """Return the id of the current process."""
    return os.getpid()