import os
import re
import time
import uuid

from cvmattest.runtime import current_utc_time, get_pid, new_uuid, time_since_epoch_millisec

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def test_uuid_is_canonical_v4():
    value = new_uuid()
    parsed = uuid.UUID(value)
    assert str(parsed) == value
    assert parsed.version == 4


def test_uuids_are_unique():
    values = {new_uuid() for _ in range(50)}
    assert len(values) == 50


def test_timestamp_format():
    stamp = current_utc_time()
    assert len(stamp) == 20
    assert bool(re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", stamp)) is True
    assert time.strftime(TIMESTAMP_FORMAT, time.strptime(stamp, TIMESTAMP_FORMAT)) == stamp


def test_timestamp_parses_back():
    stamp = current_utc_time()
    parsed = time.strptime(stamp, TIMESTAMP_FORMAT)
    assert parsed.tm_year >= 2020


def test_millis_within_bounds():
    before = int(time.time() * 1000)
    value = time_since_epoch_millisec()
    after = int(time.time() * 1000)
    assert before - 1 <= value <= after + 1


def test_millis_monotonic_enough():
    first = time_since_epoch_millisec()
    second = time_since_epoch_millisec()
    assert second >= first


def test_pid_matches_os():
    assert get_pid() == os.getpid()